"""Error types for sensorperiod.

``FormatError`` is raised by the codec for malformed periods. The
``RequestError`` family is what the HTTP layer of the API server catches:
it answers with ``status_code`` and the body from ``to_dict()``.
"""

from typing import Optional


class FormatError(ValueError):
    """Raised when a period string does not match its expected grammar."""

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


class RequestError(Exception):
    """Base for errors that map onto a client-facing HTTP status."""

    status_code = 500

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict:
        """Render the error as a response body."""
        body = {"code": self.status_code, "message": self.message}
        if self.field:
            body["field"] = self.field
        return body


class BadRequestError(RequestError):
    """Raised when client input cannot be stored."""

    status_code = 400


class NotFoundError(RequestError):
    """Raised when a requested entity does not exist."""

    status_code = 404
