from __future__ import annotations

from enum import Enum
from typing import Mapping

from . import entity_types
from .models_records import Actor, AnnotatedRecord, UserRole


class UndoPolicy(str, Enum):
    # Branch admins may undo any record of their own branch.
    BRANCH_SCOPED = "branch_scoped"
    # Only the user who created the record may undo it.
    AUTHOR_ONLY = "author_only"


DEFAULT_UNDO_POLICIES: Mapping[str, UndoPolicy] = {
    entity_types.STOCK_ENTRY: UndoPolicy.BRANCH_SCOPED,
    entity_types.STOCK_SNAPSHOT: UndoPolicy.BRANCH_SCOPED,
    entity_types.CENTER_SHIPMENT: UndoPolicy.BRANCH_SCOPED,
    entity_types.SHIPMENT: UndoPolicy.AUTHOR_ONLY,
    entity_types.WASTE_ENTRY: UndoPolicy.AUTHOR_ONLY,
    entity_types.EXPENSE: UndoPolicy.AUTHOR_ONLY,
    entity_types.CASH_MOVEMENT: UndoPolicy.AUTHOR_ONLY,
    entity_types.PRODUCE_PURCHASE: UndoPolicy.AUTHOR_ONLY,
    entity_types.PRODUCE_PAYMENT: UndoPolicy.AUTHOR_ONLY,
}

FALLBACK_UNDO_POLICY = UndoPolicy.BRANCH_SCOPED


def policy_for(entity_type: str | None, policies: Mapping[str, UndoPolicy] | None = None) -> UndoPolicy:
    table = DEFAULT_UNDO_POLICIES if policies is None else policies
    if entity_type is None:
        return FALLBACK_UNDO_POLICY
    return table.get(entity_type, FALLBACK_UNDO_POLICY)


def can_undo(
    record: AnnotatedRecord,
    actor: Actor,
    *,
    policies: Mapping[str, UndoPolicy] | None = None,
) -> bool:
    """Decide whether ``actor`` may undo ``record`` right now.

    This only gates the UI affordance. The server re-checks permission on
    every undo call and may still refuse.
    """
    if record.log_id is None or record.is_undone:
        return False
    if actor.role == UserRole.SUPER_ADMIN:
        return True
    policy = policy_for(record.entity_type, policies)
    if policy is UndoPolicy.AUTHOR_ONLY:
        return record.created_by_user_id is not None and record.created_by_user_id == actor.user_id
    if actor.role == UserRole.BRANCH_ADMIN and actor.branch_id is not None:
        return record.branch_id == actor.branch_id
    return False
