"""Stock count sessions inferred from entry timestamps.

The server has no count-session entity. A count is taken to be every stock
entry for the same business date whose ``created_at`` falls in the same
wall-clock minute. Two counts started in the same minute merge and a count
spanning a minute boundary splits; both are accepted approximations.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Sequence

from .models_records import Actor, AnnotatedRecord, StockEntry
from .undo_executor import UndoExecutor, UndoOutcome
from .undo_policy import UndoPolicy, can_undo


@dataclass(frozen=True)
class StockCountSession:
    id: str
    date: str
    created_at: datetime
    user_name: str | None
    entries: tuple[AnnotatedRecord, ...]

    @property
    def all_undone(self) -> bool:
        return all(entry.is_undone for entry in self.entries)

    @property
    def log_ids(self) -> list[int]:
        return [entry.log_id for entry in self.entries if entry.log_id is not None]


@dataclass(frozen=True)
class SessionUndoResult:
    session_id: str
    outcomes: list[UndoOutcome]
    skipped: int

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.succeeded


def stock_entry_of(entry: AnnotatedRecord) -> StockEntry:
    record = entry.record
    if isinstance(record, StockEntry):
        return record
    return StockEntry.model_validate(record.model_dump())


def session_key(entry: AnnotatedRecord) -> str:
    stock = stock_entry_of(entry)
    created = stock.created_at
    return (
        f"{stock.date.isoformat()}_"
        f"{created.year:04d}-{created.month:02d}-{created.day:02d}_"
        f"{created.hour:02d}-{created.minute:02d}"
    )


_EPOCH = datetime(1970, 1, 1)


def _timestamp(value: datetime) -> float:
    # Naive server timestamps are ordered by their wall-clock value.
    if value.tzinfo is None:
        return (value - _EPOCH).total_seconds()
    return value.timestamp()


def group_stock_entries(entries: Iterable[AnnotatedRecord]) -> list[StockCountSession]:
    buckets: dict[str, list[AnnotatedRecord]] = {}
    for entry in entries:
        buckets.setdefault(session_key(entry), []).append(entry)

    sessions: list[StockCountSession] = []
    for key, members in buckets.items():
        first = stock_entry_of(members[0])
        ordered = sorted(members, key=lambda item: _timestamp(stock_entry_of(item).created_at), reverse=True)
        sessions.append(
            StockCountSession(
                id=key,
                date=first.date.isoformat(),
                created_at=first.created_at,
                user_name=members[0].created_by_user_name,
                entries=tuple(ordered),
            )
        )
    sessions.sort(key=lambda session: _timestamp(session.created_at), reverse=True)
    return sessions


def undoable_entries(
    session: StockCountSession,
    actor: Actor,
    *,
    policies: Mapping[str, UndoPolicy] | None = None,
) -> list[AnnotatedRecord]:
    return [entry for entry in session.entries if can_undo(entry, actor, policies=policies)]


async def undo_session(
    executor: UndoExecutor,
    session: StockCountSession,
    actor: Actor,
    *,
    policies: Mapping[str, UndoPolicy] | None = None,
) -> SessionUndoResult:
    """Undo every entry of ``session`` the actor may undo; skip the rest silently."""
    targets = undoable_entries(session, actor, policies=policies)
    outcomes = await executor.undo_group(entry.log_id for entry in targets if entry.log_id is not None)
    return SessionUndoResult(
        session_id=session.id,
        outcomes=outcomes,
        skipped=len(session.entries) - len(targets),
    )


def filter_by_date(entries: Sequence[AnnotatedRecord], business_date: str | None) -> list[AnnotatedRecord]:
    if not business_date:
        return list(entries)
    return [entry for entry in entries if stock_entry_of(entry).date.isoformat() == business_date]
