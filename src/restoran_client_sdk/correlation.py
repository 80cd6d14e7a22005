from __future__ import annotations

from typing import Iterable, Sequence

from .models_audit import AuditAction, AuditLogEntry
from .models_records import AnnotatedRecord, DomainRecord

LogKey = tuple[str, int]


def index_create_logs(logs: Iterable[AuditLogEntry]) -> dict[LogKey, AuditLogEntry]:
    """Map ``(entity_type, entity_id)`` to its ``create`` log entry.

    Duplicate create entries for one entity should not exist. If they do, the
    first one in input order wins.
    """
    index: dict[LogKey, AuditLogEntry] = {}
    for log in logs:
        if log.action != AuditAction.CREATE:
            continue
        index.setdefault((log.entity_type, log.entity_id), log)
    return index


def correlate(
    records: Sequence[DomainRecord],
    logs: Sequence[AuditLogEntry],
    *,
    entity_type: str | None = None,
) -> list[AnnotatedRecord]:
    """Annotate each record with creator, create-log id and undo state.

    ``entity_type`` applies to records that do not carry their own type. Records
    without a matching create log come back with no provenance and
    ``is_undone=False``; records whose create log was undone are kept and
    flagged, never dropped.
    """
    index = index_create_logs(logs)
    annotated: list[AnnotatedRecord] = []
    for record in records:
        record_type = record.entity_type or entity_type
        log = index.get((record_type, record.id)) if record_type else None
        if log is None:
            annotated.append(AnnotatedRecord(record=record))
            continue
        annotated.append(
            AnnotatedRecord(
                record=record,
                created_by_user_id=log.user_id,
                created_by_user_name=log.user_name,
                log_id=log.id,
                is_undone=log.is_undone,
            )
        )
    return annotated
