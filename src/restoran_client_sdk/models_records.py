from __future__ import annotations

from dataclasses import dataclass
from datetime import date as Date
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    BRANCH_ADMIN = "branch_admin"


@dataclass(frozen=True)
class Actor:
    role: str
    user_id: int
    branch_id: int | None = None


class DomainRecord(BaseModel):
    """Any branch-scoped business row; collection-specific fields stay as extras."""

    model_config = ConfigDict(extra="allow")

    id: int
    branch_id: int | None = None
    entity_type: str | None = None
    created_at: datetime | None = None


class StockEntry(DomainRecord):
    product_id: int | None = None
    product_name: str | None = None
    date: Date
    quantity: float = 0.0
    note: str | None = None
    created_at: datetime

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_date(cls, value: Any) -> Any:
        # The server may send the business date as a full midnight timestamp.
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        if isinstance(value, datetime):
            return value.date()
        return value


@dataclass(frozen=True)
class AnnotatedRecord:
    """A domain record plus the provenance found in its ``create`` log entry."""

    record: DomainRecord
    created_by_user_id: int | None = None
    created_by_user_name: str | None = None
    log_id: int | None = None
    is_undone: bool = False

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def branch_id(self) -> int | None:
        return self.record.branch_id

    @property
    def entity_type(self) -> str | None:
        return self.record.entity_type

    @property
    def has_provenance(self) -> bool:
        return self.log_id is not None
