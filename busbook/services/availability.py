"""Seat numbering and seat-map derivation for a bus on a travel date."""
import time
from typing import Iterable, List, Set

from sqlalchemy import select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession

from busbook.exceptions import ValidationError
from busbook.metrics import SEAT_MAP_LATENCY
from busbook.models.models import Booking, BOOKING_CONFIRMED
from busbook.services import catalog

MIN_SEAT_WIDTH = 2


def seat_width(total_seats: int) -> int:
    """Digits used for seat labels: two, or more once a bus passes 99 seats."""
    return max(MIN_SEAT_WIDTH, len(str(total_seats)))


def format_seat_number(ordinal: int, total_seats: int) -> str:
    return str(ordinal).zfill(seat_width(total_seats))


def normalize_seat_number(seat_number: str, total_seats: int) -> str:
    """Canonical label for a requested seat, so "5" and "05" name the same seat."""
    raw = (seat_number or "").strip()
    # ASCII only: isdigit() also admits "²", which int() rejects
    if not (raw.isascii() and raw.isdigit()):
        raise ValidationError(f"Invalid seat number: {seat_number!r}")
    ordinal = int(raw)
    if ordinal < 1 or ordinal > total_seats:
        raise ValidationError(f"Seat number {seat_number} is outside 1..{total_seats}")
    return format_seat_number(ordinal, total_seats)


def build_seat_map(total_seats: int, booked: Iterable[str]) -> List[dict]:
    booked = set(booked)
    return [
        {"seat_number": label, "is_available": label not in booked}
        for label in (format_seat_number(i, total_seats) for i in range(1, total_seats + 1))
    ]


async def confirmed_seats(db: AsyncSession, bus_id: int, travel_date: str) -> Set[str]:
    stmt = (
        sa_select(Booking.seat_number)
        .where(Booking.bus_id == bus_id)
        .where(Booking.travel_date == travel_date)
        .where(Booking.status == BOOKING_CONFIRMED)
    )
    res = await db.execute(stmt)
    return set(res.scalars().all())


async def compute_seat_map(db: AsyncSession, bus_id: int, travel_date: str) -> List[dict]:
    """Seat map read straight from the ledger; nothing is cached."""
    start = time.perf_counter()
    bus = await catalog.get_bus(db, bus_id)
    booked = await confirmed_seats(db, bus.id, travel_date)
    seats = build_seat_map(bus.total_seats, booked)
    SEAT_MAP_LATENCY.observe(time.perf_counter() - start)
    return seats
