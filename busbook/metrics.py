from prometheus_client import Counter, Histogram

# Booking ledger metrics
BOOKINGS_CREATED = Counter("busbook_bookings_created_total", "Confirmed bookings created")
BOOKING_CONFLICTS = Counter("busbook_booking_conflicts_total", "Booking attempts rejected because the seat was taken")
BOOKINGS_CANCELLED = Counter("busbook_bookings_cancelled_total", "Bookings cancelled by their owner")

# Seat map metrics
SEAT_MAP_LATENCY = Histogram("busbook_seat_map_latency_seconds", "Latency for seat map computation")

# Auth metrics
LOGIN_ATTEMPTS = Counter("busbook_login_attempts_total", "Login attempts", ["result"])
