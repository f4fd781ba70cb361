"""Booking ledger: the authoritative record of seat bookings.

The only correctness property this module owns is that a seat on a bus for
a travel date holds at most one confirmed booking. That is not checked here
with a read-then-write; the partial unique index ``uq_bookings_confirmed_seat``
rejects the second insert and the IntegrityError becomes SeatAlreadyBooked.
"""
import logging
from datetime import date
from typing import List, Optional, Union

from sqlalchemy import select as sa_select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from busbook.exceptions import NotFound, SeatAlreadyBooked, ValidationError
from busbook.metrics import BOOKING_CONFLICTS, BOOKINGS_CANCELLED, BOOKINGS_CREATED
from busbook.models.models import Booking, Bus, BOOKING_CANCELLED, BOOKING_CONFIRMED
from busbook.services import catalog
from busbook.services.audit import log_audit
from busbook.services.auth import Identity
from busbook.services.availability import normalize_seat_number

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


def normalize_travel_date(travel_date: Union[date, str]) -> str:
    if isinstance(travel_date, date):
        return travel_date.isoformat()
    try:
        return date.fromisoformat(str(travel_date)).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid travel date: {travel_date!r}, expected YYYY-MM-DD")


async def create_booking(
    db: AsyncSession,
    identity: Identity,
    bus_id: int,
    seat_number: str,
    travel_date: Union[date, str],
    passenger: Optional[dict] = None,
) -> Booking:
    bus = await catalog.get_bus(db, bus_id)
    seat = normalize_seat_number(seat_number, bus.total_seats)
    travel_date = normalize_travel_date(travel_date)
    passenger = passenger or {}

    booking = Booking(
        user_id=identity.user_id,
        bus_id=bus.id,
        seat_number=seat,
        travel_date=travel_date,
        status=BOOKING_CONFIRMED,
        passenger_name=passenger.get("name"),
        passenger_age=passenger.get("age"),
        passenger_gender=passenger.get("gender"),
    )
    db.add(booking)
    try:
        await db.flush()
        await log_audit(
            db,
            actor_id=identity.user_id,
            action="create_booking",
            object_type="booking",
            object_id=str(booking.id),
            detail={"bus_id": bus_id, "seat_number": seat, "travel_date": travel_date},
        )
        await db.commit()
    except IntegrityError:
        await db.rollback()
        BOOKING_CONFLICTS.inc()
        logger.warning(
            "Seat already booked",
            extra={"bus_id": bus_id, "seat_number": seat, "travel_date": travel_date, "user_id": identity.user_id},
        )
        raise SeatAlreadyBooked()

    await db.refresh(booking)
    BOOKINGS_CREATED.inc()
    logger.info(
        "Booking confirmed",
        extra={"booking_id": booking.id, "bus_id": bus_id, "seat_number": seat, "travel_date": travel_date},
    )
    return booking


async def cancel_booking(db: AsyncSession, booking_id: int, identity: Identity) -> bool:
    """Cancel a booking owned by the caller.

    Someone else's booking is reported as NotFound so ownership is not
    revealed. Cancelling twice is a no-op.
    """
    stmt = (
        sa_select(Booking)
        .where(Booking.id == booking_id)
        .where(Booking.user_id == identity.user_id)
        .with_for_update()
    )
    res = await db.execute(stmt)
    booking = res.scalars().first()
    if booking is None:
        raise NotFound("Booking not found")

    if booking.status == BOOKING_CANCELLED:
        return True

    booking.status = BOOKING_CANCELLED
    await log_audit(
        db,
        actor_id=identity.user_id,
        action="cancel_booking",
        object_type="booking",
        object_id=str(booking.id),
        detail={"bus_id": booking.bus_id, "seat_number": booking.seat_number, "travel_date": booking.travel_date},
    )
    await db.commit()
    BOOKINGS_CANCELLED.inc()
    logger.info("Booking cancelled", extra={"booking_id": booking_id, "user_id": identity.user_id})
    return True


def booking_ref(booking: Booking) -> str:
    return f"BK{booking.id:06d}"


def booking_detail(booking: Booking, bus: Optional[Bus]) -> dict:
    """Booking joined with the bus as it is now, not as it was when booked."""
    route = bus.route if bus is not None else {}
    return {
        "id": booking.id,
        "booking_ref": booking_ref(booking),
        "bus_id": booking.bus_id,
        "bus_number": bus.bus_number if bus is not None else UNKNOWN,
        "bus_type": (bus.bus_type or UNKNOWN) if bus is not None else UNKNOWN,
        "route": {
            "from": route.get("from") or UNKNOWN,
            "to": route.get("to") or UNKNOWN,
            "departure_time": route.get("departure_time") or UNKNOWN,
            "arrival_time": route.get("arrival_time") or UNKNOWN,
            "price": route.get("price", 0),
        },
        "seat_number": booking.seat_number,
        "status": booking.status,
        "travel_date": booking.travel_date,
        "booking_date": booking.booking_date,
        "passenger": booking.passenger,
    }


async def list_for_user(db: AsyncSession, identity: Identity) -> List[dict]:
    stmt = (
        sa_select(Booking, Bus)
        .outerjoin(Bus, Bus.id == Booking.bus_id)
        .where(Booking.user_id == identity.user_id)
        .order_by(Booking.booking_date.desc(), Booking.id.desc())
    )
    res = await db.execute(stmt)
    return [booking_detail(booking, bus) for booking, bus in res.all()]
