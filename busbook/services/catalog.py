import logging
from typing import Iterable, List

from sqlalchemy import delete as sa_delete
from sqlalchemy import func as sa_func
from sqlalchemy import select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession

from busbook.exceptions import NotFound
from busbook.models.models import Bus

logger = logging.getLogger(__name__)


SAMPLE_BUSES = [
    {"bus_number": "Easy Coach - KCH 123A", "bus_type": "Standard", "total_seats": 44, "route": {"from": "Nairobi", "to": "Kisumu", "departure_time": "08:15 AM", "arrival_time": "04:30 PM", "price": 1450}},
    {"bus_number": "Mash East Africa - KDA 456B", "bus_type": "VIP Oxygen", "total_seats": 36, "route": {"from": "Nairobi", "to": "Mombasa", "departure_time": "10:00 PM", "arrival_time": "06:00 AM", "price": 2200}},
    {"bus_number": "Tahmeed - KDB 789C", "bus_type": "Luxury Coach", "total_seats": 32, "route": {"from": "Mombasa", "to": "Nairobi", "departure_time": "09:00 AM", "arrival_time": "05:00 PM", "price": 1600}},
    {"bus_number": "Dreamline - KDC 012D", "bus_type": "Executive", "total_seats": 40, "route": {"from": "Nairobi", "to": "Eldoret", "departure_time": "07:30 AM", "arrival_time": "01:30 PM", "price": 1300}},
    {"bus_number": "Guardian Angel - KDD 345E", "bus_type": "Standard", "total_seats": 52, "route": {"from": "Nairobi", "to": "Busia", "departure_time": "09:00 PM", "arrival_time": "05:00 AM", "price": 1500}},
    {"bus_number": "Modern Coast - KDE 678F", "bus_type": "VIP", "total_seats": 28, "route": {"from": "Nairobi", "to": "Mombasa", "departure_time": "08:00 AM", "arrival_time": "04:30 PM", "price": 2500}},
    {"bus_number": "Super Metro - KDF 901G", "bus_type": "Semi-Luxury", "total_seats": 48, "route": {"from": "Nairobi", "to": "Nakuru", "departure_time": "06:00 AM", "arrival_time": "09:00 AM", "price": 800}},
    {"bus_number": "Transline Galaxy - KDG 234H", "bus_type": "Standard", "total_seats": 14, "route": {"from": "Nairobi", "to": "Kisii", "departure_time": "10:00 AM", "arrival_time": "04:00 PM", "price": 1200}},
]


def bus_from_dict(data: dict) -> Bus:
    route = data.get("route") or {}
    return Bus(
        bus_number=data["bus_number"],
        bus_type=data.get("bus_type"),
        total_seats=data["total_seats"],
        route_from=route["from"],
        route_to=route["to"],
        departure_time=route.get("departure_time"),
        arrival_time=route.get("arrival_time"),
        price=route.get("price", 0),
    )


async def list_buses(db: AsyncSession) -> List[Bus]:
    res = await db.execute(sa_select(Bus).order_by(Bus.id))
    return list(res.scalars().all())


async def get_bus(db: AsyncSession, bus_id: int) -> Bus:
    bus = await db.get(Bus, bus_id)
    if bus is None:
        raise NotFound("Bus not found")
    return bus


async def create_bus(db: AsyncSession, data: dict) -> Bus:
    bus = bus_from_dict(data)
    db.add(bus)
    await db.commit()
    await db.refresh(bus)
    logger.info("Bus created", extra={"bus_id": bus.id, "bus_number": bus.bus_number})
    return bus


async def seed_buses(db: AsyncSession, sample_buses: Iterable[dict] = SAMPLE_BUSES, force: bool = False) -> int:
    """Load sample buses; a populated catalog is left alone unless force is set."""
    count = (await db.execute(sa_select(sa_func.count()).select_from(Bus))).scalar_one()
    if count > 0 and not force:
        return 0
    buses = [bus_from_dict(b) for b in sample_buses]
    if force:
        await db.execute(sa_delete(Bus))
    db.add_all(buses)
    await db.commit()
    logger.info("Catalog seeded", extra={"count": len(buses), "force": force})
    return len(buses)
