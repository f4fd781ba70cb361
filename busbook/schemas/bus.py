from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Route(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(..., alias="from", min_length=1)
    to: str = Field(..., min_length=1)
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None
    price: float = Field(0, ge=0)


class BusCreate(BaseModel):
    bus_number: str = Field(..., min_length=1, max_length=128)
    bus_type: Optional[str] = None
    total_seats: int = Field(..., gt=0)
    route: Route


class BusOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bus_number: str
    bus_type: Optional[str] = None
    total_seats: int
    route: Route


class SeatOut(BaseModel):
    seat_number: str
    is_available: bool


class SeatMapOut(BaseModel):
    travel_date: str
    seats: List[SeatOut]


class SeedOut(BaseModel):
    seeded: int
    message: str
