"""Racing createBooking calls on separate connections to a file-backed SQLite ledger."""
import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy import select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from busbook.db.base import Base
from busbook.exceptions import SeatAlreadyBooked
from busbook.models.models import Booking, BOOKING_CONFIRMED
from busbook.services import auth as auth_service
from busbook.services import catalog, ledger
from busbook.services.auth import Identity

TRAVEL_DATE = "2025-06-01"


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 15},
    )

    # take the write lock when a transaction starts, so racing writers queue on
    # SQLite's busy timeout instead of failing with "database is locked"
    @event.listens_for(engine.sync_engine, "connect")
    def _no_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def file_sessions(file_engine):
    return async_sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False)


async def _setup(file_sessions):
    async with file_sessions() as db:
        bus = await catalog.create_bus(
            db, {"bus_number": "Race Coach", "total_seats": 4, "route": {"from": "Nairobi", "to": "Nakuru", "price": 600}}
        )
    riders = []
    for i in range(2):
        async with file_sessions() as db:
            user = await auth_service.register_user(db, f"rider{i}", f"rider{i}@example.com", "secret123")
        riders.append(Identity(user_id=user.id, role=user.role))
    return bus.id, riders


async def _book(file_sessions, identity, bus_id, seat_number):
    async with file_sessions() as db:
        return await ledger.create_booking(db, identity, bus_id, seat_number, TRAVEL_DATE, {"name": "Racer"})


@pytest.mark.asyncio
async def test_racing_bookings_for_one_seat_confirm_exactly_one(file_sessions):
    bus_id, riders = await _setup(file_sessions)

    results = await asyncio.gather(
        _book(file_sessions, riders[0], bus_id, "02"),
        _book(file_sessions, riders[1], bus_id, "2"),
        return_exceptions=True,
    )

    booked = [r for r in results if isinstance(r, Booking)]
    conflicts = [r for r in results if isinstance(r, SeatAlreadyBooked)]
    assert len(booked) == 1, results
    assert len(conflicts) == 1, results

    async with file_sessions() as db:
        rows = (
            await db.execute(
                sa_select(Booking).where(Booking.bus_id == bus_id).where(Booking.status == BOOKING_CONFIRMED)
            )
        ).scalars().all()
    assert [(b.seat_number, b.user_id) for b in rows] == [("02", booked[0].user_id)]


@pytest.mark.asyncio
async def test_racing_bookings_for_different_seats_all_succeed(file_sessions):
    bus_id, riders = await _setup(file_sessions)

    results = await asyncio.gather(
        _book(file_sessions, riders[0], bus_id, "01"),
        _book(file_sessions, riders[1], bus_id, "03"),
        return_exceptions=True,
    )

    assert all(isinstance(r, Booking) for r in results), results
    assert sorted(r.seat_number for r in results) == ["01", "03"]
