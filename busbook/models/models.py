from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Numeric,
    JSON,
    CheckConstraint,
    Index,
    text,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from busbook.db.base import Base


BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    username = Column(String(128), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    # "user" or "admin"
    role = Column(String(50), nullable=False, default="user", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    bookings = relationship("Booking", back_populates="user")


class Bus(Base):
    __tablename__ = "buses"
    id = Column(Integer, primary_key=True)
    bus_number = Column(String(128), nullable=False, index=True)
    bus_type = Column(String(64), nullable=True)
    total_seats = Column(Integer, nullable=False)
    route_from = Column(String(128), nullable=False, index=True)
    route_to = Column(String(128), nullable=False, index=True)
    departure_time = Column(String(32), nullable=True)
    arrival_time = Column(String(32), nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("total_seats > 0", name="ck_buses_total_seats_positive"),
        CheckConstraint("price >= 0", name="ck_buses_price_non_negative"),
        # bookings keep bus_id without an FK, so ids of deleted buses must never be reissued
        {"sqlite_autoincrement": True},
    )

    @property
    def route(self) -> dict:
        return {
            "from": self.route_from,
            "to": self.route_to,
            "departure_time": self.departure_time,
            "arrival_time": self.arrival_time,
            "price": float(self.price or 0),
        }


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    # no FK: a force re-seed of the catalog must not wipe the ledger
    bus_id = Column(Integer, nullable=False, index=True)
    seat_number = Column(String(8), nullable=False)
    travel_date = Column(String(10), nullable=False)
    booking_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    status = Column(String(20), nullable=False, default=BOOKING_CONFIRMED, index=True)
    passenger_name = Column(String(255), nullable=True)
    passenger_age = Column(Integer, nullable=True)
    passenger_gender = Column(String(32), nullable=True)

    user = relationship("User", back_populates="bookings")

    __table_args__ = (
        # at most one confirmed booking per seat per bus per travel date
        Index(
            "uq_bookings_confirmed_seat",
            "bus_id",
            "travel_date",
            "seat_number",
            unique=True,
            postgresql_where=text("status = 'confirmed'"),
            sqlite_where=text("status = 'confirmed'"),
        ),
        Index("ix_bookings_bus_date", "bus_id", "travel_date"),
    )

    @property
    def passenger(self) -> dict:
        return {
            "name": self.passenger_name,
            "age": self.passenger_age,
            "gender": self.passenger_gender,
        }


class AuditLog(Base):
    __tablename__ = "audit_logs"
    id = Column(Integer, primary_key=True)
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = Column(String(255), nullable=False)
    object_type = Column(String(128), nullable=True)
    object_id = Column(String(128), nullable=True)
    detail = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
