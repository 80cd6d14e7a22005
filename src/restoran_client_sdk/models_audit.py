from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    UNDO = "undo"


class AuditLogEntry(BaseModel):
    """One server-side audit record. Only the undo fields ever change."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int
    created_at: datetime
    branch_id: int | None = None
    user_id: int
    user_name: str = ""
    entity_type: str
    entity_id: int
    action: AuditAction
    description: str = ""
    is_undone: bool = False
    undone_by: int | None = None
    undone_at: datetime | None = None


class LogScope(BaseModel):
    model_config = ConfigDict(frozen=True)

    branch_id: int | None = None
    user_id: int | None = None
    entity_id: int | None = None

    def to_params(self, entity_type: str | None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "entity_type": entity_type,
            "branch_id": self.branch_id,
            "user_id": self.user_id,
            "entity_id": self.entity_id,
        }
        return {key: value for key, value in params.items() if value is not None}


class UndoResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str | None = None
