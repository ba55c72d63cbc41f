"""Custom exceptions for the booking calendar engine."""


class BookingCalendarError(Exception):
    """Base exception for booking calendar errors."""


class RecordReadError(BookingCalendarError):
    """Raised when reading source records from the store fails."""


class RecordWriteError(BookingCalendarError):
    """Raised when writing a source record back to the store fails."""


class ConfigurationError(BookingCalendarError):
    """Raised when configuration is invalid or incomplete."""


class InvalidEventIdError(BookingCalendarError):
    """Raised when an event id does not follow the derived id scheme."""


class UnsupportedRescheduleError(BookingCalendarError):
    """Raised when an event kind has no mutation path for rescheduling."""

    def __init__(self, event_id: str, kind: str, hint: str = ""):
        self.event_id = event_id
        self.kind = kind
        message = f"Rescheduling '{kind}' events is not supported (event {event_id})"
        if hint:
            message = f"{message}; {hint}"
        super().__init__(message)
