"""Domain errors raised by the services and rendered by the HTTP layer."""


class BookingError(Exception):
    status_code: int = 400
    code: str = "BookingError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(BookingError):
    status_code = 400
    code = "ValidationError"


class NotFound(BookingError):
    status_code = 404
    code = "NotFound"


class DuplicateEmail(BookingError):
    status_code = 400
    code = "DuplicateEmail"

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class InvalidCredentials(BookingError):
    status_code = 401
    code = "InvalidCredentials"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class Unauthorized(BookingError):
    status_code = 401
    code = "Unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Forbidden(BookingError):
    status_code = 403
    code = "Forbidden"

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class SeatAlreadyBooked(BookingError):
    status_code = 409
    code = "SeatAlreadyBooked"

    def __init__(self, message: str = "Seat already booked"):
        super().__init__(message)


class TooManyAttempts(BookingError):
    status_code = 429
    code = "TooManyAttempts"

    def __init__(self, message: str = "Too many login attempts, try later"):
        super().__init__(message)


class StorageUnavailable(BookingError):
    status_code = 500
    code = "StorageUnavailable"

    def __init__(self, message: str = "Storage unavailable"):
        super().__init__(message)
