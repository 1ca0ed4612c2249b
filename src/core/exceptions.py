"""Custom exception classes for the Mentor Connect scheduling service.

This module defines application-specific exceptions following Google Python
Style Guide.
"""

from typing import Iterable, List, Optional


class MentorConnectError(Exception):
    """Base exception for all Mentor Connect errors."""

    pass


class ParseError(MentorConnectError):
    """Raised when a date or time string is malformed."""

    def __init__(self, value: str, expected: str):
        """Initialize the exception.

        Args:
            value: The string that could not be parsed.
            expected: Description of the expected format.
        """
        self.value = value
        self.expected = expected
        super().__init__(f"Cannot parse '{value}': expected {expected}")


class DuplicateSlotError(MentorConnectError):
    """Raised when a slot batch collides with existing slots.

    The whole batch is rejected; none of it was created.
    """

    def __init__(self, dates: Iterable[str]):
        """Initialize the exception.

        Args:
            dates: The dd-mm-yyyy dates on which a collision was found.
        """
        self.dates: List[str] = list(dict.fromkeys(dates))
        super().__init__(
            "A slot with the same date and start time already exists on: "
            + ", ".join(self.dates)
        )


class RemoteRequestError(MentorConnectError):
    """Raised when a call to the remote API fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        """Initialize the exception.

        Args:
            message: Error text, taken from the API response when available.
            status_code: HTTP status of the failed response, if any.
        """
        self.status_code = status_code
        super().__init__(message)


class ValidationError(MentorConnectError):
    """Raised when input data violates a scheduling rule."""

    pass


class InvalidTransitionError(MentorConnectError):
    """Raised when a booking flow step is taken from the wrong state."""

    pass


class BookingLimitError(MentorConnectError):
    """Raised when a student has reached the maximum number of bookings."""

    def __init__(self, limit: int):
        """Initialize the exception.

        Args:
            limit: The configured booking limit.
        """
        self.limit = limit
        super().__init__(
            f"Booking limit reached. You can only book {limit} sessions."
        )


class ConfigurationError(MentorConnectError):
    """Raised when there is a configuration error."""

    pass
