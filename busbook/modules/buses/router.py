from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from busbook.auth.deps import role_required
from busbook.db.session import get_session
from busbook.schemas.bus import BusCreate, BusOut, SeatMapOut, SeedOut
from busbook.services import availability, catalog

router = APIRouter(tags=["buses"])

admin_only = role_required(["admin"])


@router.get("", response_model=List[BusOut])
async def list_buses(db: AsyncSession = Depends(get_session)):
    return await catalog.list_buses(db)


@router.post("", status_code=201, response_model=BusOut, dependencies=[Depends(admin_only)])
async def create_bus(payload: BusCreate, db: AsyncSession = Depends(get_session)):
    return await catalog.create_bus(db, payload.model_dump(by_alias=True))


@router.post("/seed", response_model=SeedOut, dependencies=[Depends(admin_only)])
async def seed_buses(force: bool = False, db: AsyncSession = Depends(get_session)):
    seeded = await catalog.seed_buses(db, force=force)
    if not seeded:
        return {"seeded": 0, "message": "Already seeded"}
    return {"seeded": seeded, "message": "Seeding successful"}


@router.get("/{bus_id}", response_model=BusOut)
async def get_bus(bus_id: int, db: AsyncSession = Depends(get_session)):
    return await catalog.get_bus(db, bus_id)


@router.get("/{bus_id}/seats", response_model=SeatMapOut)
async def get_seat_map(bus_id: int, travel_date: date = Query(..., alias="date"), db: AsyncSession = Depends(get_session)):
    seats = await availability.compute_seat_map(db, bus_id, travel_date.isoformat())
    return {"travel_date": travel_date.isoformat(), "seats": seats}
