# mapfeed/core/errors.py
# Failures of the remote collection fetches. These are returned to callers and
# recorded for display; they never escape PageLoader as exceptions.

from typing import Optional

from mapfeed.models.dto import ErrorResponse


class FetchError(Exception):
    """Base class for a failed page or meta fetch."""

    code = "FETCH_ERROR"

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.code, detail=str(self))


class BadStatusError(FetchError):
    """The collection endpoint answered with a non-2xx status."""

    code = "BAD_STATUS"

    def __init__(self, status_code: int):
        super().__init__(f"Response status: {status_code}")
        self.status_code = status_code


class TransportError(FetchError):
    """Network failure, timeout, or a body that could not be used.

    A malformed page (missing coordinates, wrong geometry type) is reported
    this way too, so the whole page is discarded.
    """

    code = "TRANSPORT_ERROR"

    def __init__(self, cause: Optional[BaseException] = None, message: Optional[str] = None):
        super().__init__(message or f"Transport failure: {cause}")
        self.cause = cause
