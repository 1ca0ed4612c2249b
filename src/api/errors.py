"""Translation of service exceptions to HTTP errors."""

from fastapi import HTTPException, status

from core.exceptions import (
    BookingLimitError,
    DuplicateSlotError,
    InvalidTransitionError,
    MentorConnectError,
    ParseError,
    RemoteRequestError,
    ValidationError,
)


def to_http_exception(error: MentorConnectError) -> HTTPException:
    """Map a service exception to the HTTPException a route should raise.

    Upstream client errors keep their status and message; any other upstream
    failure becomes 502.
    """
    if isinstance(error, (ParseError, ValidationError, InvalidTransitionError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, (DuplicateSlotError, BookingLimitError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, RemoteRequestError):
        code = error.status_code
        if code is not None and 400 <= code < 500:
            return HTTPException(status_code=code, detail=str(error))
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
