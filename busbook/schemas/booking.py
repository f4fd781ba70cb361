from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from busbook.schemas.bus import Route


class Passenger(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = Field(None, max_length=32)


class CreateBookingRequest(BaseModel):
    bus_id: int
    seat_number: str
    travel_date: date
    passenger: Optional[Passenger] = None

    @field_validator("seat_number", mode="before")
    @classmethod
    def seat_number_as_str(cls, v):
        # clients send either "05" or 5
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    bus_id: int
    seat_number: str
    travel_date: str
    booking_date: Optional[datetime] = None
    status: str
    passenger: Passenger


class BookingDetail(BaseModel):
    id: int
    booking_ref: str
    bus_id: int
    bus_number: str
    bus_type: str
    route: Route
    seat_number: str
    status: str
    travel_date: str
    booking_date: Optional[datetime] = None
    passenger: Passenger


class CancelOut(BaseModel):
    success: bool
    message: str
