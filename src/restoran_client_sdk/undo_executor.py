from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterable

from .clients.audit_logs_client import AuditLogClient
from .exceptions import ApiError
from .logger import get_logger, log_action
from .models_records import Actor

logger = get_logger(__name__)


@dataclass(frozen=True)
class UndoOutcome:
    log_id: int
    succeeded: bool
    message: str | None = None
    error: Exception | None = None


@dataclass
class UndoExecutor:
    client: AuditLogClient
    actor: Actor | None = None

    async def undo(self, log_id: int) -> UndoOutcome:
        """Undo one log entry. Failures come back as an outcome, never retried."""
        try:
            response = await self.client.undo(log_id)
        except ApiError as exc:
            self._log(log_id, "failure", error_code=exc.code, status_code=exc.status_code)
            return UndoOutcome(log_id=log_id, succeeded=False, message=exc.message, error=exc)
        except ValueError as exc:
            # Malformed success body: the server may have applied the undo.
            self._log(log_id, "failure", error_code="INVALID_RESPONSE", status_code=None)
            return UndoOutcome(log_id=log_id, succeeded=False, message=str(exc), error=exc)
        self._log(log_id, "success")
        return UndoOutcome(log_id=log_id, succeeded=True, message=response.message)

    async def undo_group(self, log_ids: Iterable[int]) -> list[UndoOutcome]:
        """Undo several log entries concurrently and wait for all of them.

        Successes are kept even when other calls fail; callers refetch to see
        the resulting state.
        """
        distinct = list(dict.fromkeys(log_ids))
        if not distinct:
            return []
        return list(await asyncio.gather(*(self.undo(log_id) for log_id in distinct)))

    def _log(self, log_id: int, outcome: str, **fields: object) -> None:
        log_action(
            logger,
            module="audit_logs",
            action="undo",
            actor_role=self.actor.role if self.actor else None,
            branch_id=self.actor.branch_id if self.actor else None,
            outcome=outcome,
            log_id=log_id,
            **fields,
        )


def failed_outcomes(outcomes: Iterable[UndoOutcome]) -> list[UndoOutcome]:
    return [outcome for outcome in outcomes if not outcome.succeeded]
