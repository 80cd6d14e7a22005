from __future__ import annotations

from .models_audit import LogScope
from .models_records import Actor, UserRole


def resolve_log_scope(
    actor: Actor,
    selected_branch_id: int | None = None,
    *,
    user_id: int | None = None,
) -> LogScope:
    """Branch filter for audit log queries.

    Super admins see the selected branch, or every branch when none is
    selected. Branch admins are always pinned to their own branch.
    """
    if actor.role == UserRole.SUPER_ADMIN:
        return LogScope(branch_id=selected_branch_id, user_id=user_id)
    if actor.role == UserRole.BRANCH_ADMIN and actor.branch_id is not None:
        return LogScope(branch_id=actor.branch_id, user_id=user_id)
    return LogScope(user_id=user_id)


def resolve_record_branch(actor: Actor, selected_branch_id: int | None = None) -> int | None:
    # The server already scopes branch admins to their branch.
    if actor.role == UserRole.SUPER_ADMIN:
        return selected_branch_id
    return None
