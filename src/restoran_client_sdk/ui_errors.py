from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError
from .models_bulk_import import CancellableOperationState, OperationStatus

UNDO_FAILED_MESSAGE = "Undo failed"

BULK_IMPORT_MESSAGES: dict[OperationStatus, str] = {
    OperationStatus.SUCCEEDED: "Bulk import finished",
    OperationStatus.CANCELLED: "Bulk import cancelled. It is safe to start it again",
    OperationStatus.TIMED_OUT: (
        "Bulk import timed out. The server may still be importing; "
        "check the server logs before starting it again"
    ),
    OperationStatus.FAILED: "Bulk import failed",
}


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    primary = exc.message.strip() or "Request failed"
    details = f"{exc.code} (HTTP {exc.status_code})"
    if exc.details:
        details = f"{details}: {exc.details}"
    return UserFacingError(message=primary, details=details)


def undo_failure_message(message: str | None) -> str:
    if message and message.strip():
        return message.strip()
    return UNDO_FAILED_MESSAGE


def describe_bulk_import(state: CancellableOperationState) -> str:
    """Summarize a finished bulk import; each terminal state reads differently."""
    if state.status is OperationStatus.RUNNING:
        return "Bulk import running"
    if state.status is OperationStatus.IDLE:
        return ""
    headline = BULK_IMPORT_MESSAGES[state.status]
    if state.status is OperationStatus.FAILED and state.message:
        headline = f"{headline}: {state.message}"
    counters = f"{state.imported} imported, {state.skipped} skipped"
    if state.errors:
        counters = f"{counters}, {len(state.errors)} errors"
    return f"{headline} ({counters})"
