from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from busbook.auth.deps import get_current_identity
from busbook.db.session import get_session
from busbook.schemas.booking import BookingDetail, BookingOut, CancelOut, CreateBookingRequest
from busbook.services import ledger
from busbook.services.auth import Identity

router = APIRouter(tags=["bookings"])


@router.post("", status_code=201, response_model=BookingOut)
async def create_booking(req: CreateBookingRequest, db: AsyncSession = Depends(get_session), identity: Identity = Depends(get_current_identity)):
    """Book one seat; a seat already confirmed for that date answers 409."""
    passenger = req.passenger.model_dump() if req.passenger else None
    return await ledger.create_booking(db, identity, req.bus_id, req.seat_number, req.travel_date, passenger)


@router.get("/user", response_model=List[BookingDetail])
async def list_user_bookings(db: AsyncSession = Depends(get_session), identity: Identity = Depends(get_current_identity)):
    return await ledger.list_for_user(db, identity)


@router.delete("/{booking_id}", response_model=CancelOut)
async def cancel_booking(booking_id: int, db: AsyncSession = Depends(get_session), identity: Identity = Depends(get_current_identity)):
    await ledger.cancel_booking(db, booking_id, identity)
    return {"success": True, "message": "Booking cancelled"}
