from __future__ import annotations

from typing import Iterable

from .clients.audit_logs_client import AuditLogClient
from .models_audit import AuditLogEntry, LogScope


def filter_by_month(logs: Iterable[AuditLogEntry], year: int, month: int) -> list[AuditLogEntry]:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    return [log for log in logs if log.created_at.year == year and log.created_at.month == month]


async def fetch_user_activity(
    client: AuditLogClient,
    *,
    user_id: int,
    branch_id: int,
    year: int,
    month: int,
    entity_type: str | None = None,
) -> list[AuditLogEntry]:
    """One user's audit trail inside a branch for a calendar month, newest first."""
    logs = await client.fetch(entity_type, LogScope(branch_id=branch_id, user_id=user_id))
    return filter_by_month(logs, year, month)
