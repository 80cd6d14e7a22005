from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BulkImportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    prefix: str
    start: int
    end: int
    delay_ms: int = 500


class BulkImportResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    imported: int = 0
    skipped: int = 0
    errors: list[str] = Field(default_factory=list)
    cancelled: bool = False


class OperationStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset(
    {
        OperationStatus.SUCCEEDED,
        OperationStatus.CANCELLED,
        OperationStatus.TIMED_OUT,
        OperationStatus.FAILED,
    }
)


@dataclass(frozen=True)
class CancellableOperationState:
    status: OperationStatus = OperationStatus.IDLE
    imported: int = 0
    skipped: int = 0
    errors: tuple[str, ...] = field(default_factory=tuple)
    message: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
