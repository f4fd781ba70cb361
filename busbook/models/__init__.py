from busbook.db.base import Base
from .models import *

__all__ = [
    "Base",
    "User",
    "Bus",
    "Booking",
    "AuditLog",
    "BOOKING_CONFIRMED",
    "BOOKING_CANCELLED",
]
