from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class AuthError(UnauthorizedError):
    """Authentication failed or session is invalid."""


class PermissionError(ForbiddenError):
    """Role or branch scope does not allow the operation."""


class ConflictError(ApiError):
    """409 or conflict-style errors."""


class RateLimitError(ApiError):
    """429 throttling error."""


class ServerError(ApiError):
    """5xx server-side failures."""


class GatewayTimeoutError(ServerError):
    """408/504: an intermediary gave up waiting; the server may still be working."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class RequestTimeoutError(TransportError):
    """The client stopped waiting for a response after its configured timeout."""


class RequestCancelledError(TransportError):
    """The caller cancelled the request before a response arrived."""


class UndoRejectedError(ValidationError):
    """The server refused to undo the log entry (already undone, unknown action)."""
