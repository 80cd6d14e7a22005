from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from .bulk_import import BulkImportController, StateListener
from .clients.audit_logs_client import AuditLogClient
from .clients.bulk_import_client import BulkImportClient
from .clients.records_client import RecordsClient
from .config import ClientConfig
from .correlation import correlate
from .entity_types import STOCK_ENTRY
from .exceptions import ApiError
from .http_client import HttpClient
from .logger import get_logger, log_action
from .models_records import Actor, AnnotatedRecord
from .scope import resolve_log_scope, resolve_record_branch
from .stock_sessions import SessionUndoResult, StockCountSession, filter_by_date, group_stock_entries, undo_session
from .undo_executor import UndoExecutor, UndoOutcome
from .undo_policy import UndoPolicy, can_undo

logger = get_logger(__name__)

_FETCH_ERRORS = (ApiError, ValueError)


@dataclass
class BackOfficeSession:
    config: ClientConfig
    actor: Actor
    token: str | None = None
    policies: Mapping[str, UndoPolicy] | None = None
    transport: httpx.AsyncBaseTransport | None = None
    http: HttpClient | None = None

    def __post_init__(self) -> None:
        if self.http is None:
            self.http = HttpClient(config=self.config, transport=self.transport)

    async def __aenter__(self) -> "BackOfficeSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self.http is not None:
            await self.http.aclose()

    def _http(self) -> HttpClient:
        if self.http is None:
            raise RuntimeError("HTTP client not initialized")
        return self.http

    def audit_log_client(self) -> AuditLogClient:
        return AuditLogClient(http=self._http(), access_token=self.token)

    def records_client(self) -> RecordsClient:
        return RecordsClient(http=self._http(), access_token=self.token)

    def bulk_import_client(self) -> BulkImportClient:
        return BulkImportClient(http=self._http(), access_token=self.token)

    def undo_executor(self) -> UndoExecutor:
        return UndoExecutor(client=self.audit_log_client(), actor=self.actor)

    def bulk_import_controller(self, on_change: StateListener | None = None) -> BulkImportController:
        return BulkImportController(self.bulk_import_client(), actor=self.actor, on_change=on_change)

    async def load_annotated(
        self,
        entity_type: str,
        selected_branch_id: int | None = None,
        **record_params: Any,
    ) -> list[AnnotatedRecord]:
        """Fetch a collection and its audit logs together and join them.

        A failed record fetch yields an empty list. A failed log fetch yields
        the records without provenance. Neither failure is raised.
        """
        records, logs = await asyncio.gather(
            self.records_client().list_records(
                entity_type,
                resolve_record_branch(self.actor, selected_branch_id),
                **record_params,
            ),
            self.audit_log_client().fetch(entity_type, resolve_log_scope(self.actor, selected_branch_id)),
            return_exceptions=True,
        )
        if isinstance(records, BaseException):
            if not isinstance(records, _FETCH_ERRORS):
                raise records
            self._log_fetch_failure(entity_type, "list_records", records)
            return []
        if isinstance(logs, BaseException):
            if not isinstance(logs, _FETCH_ERRORS):
                raise logs
            self._log_fetch_failure(entity_type, "fetch_audit_logs", logs)
            logs = []
        return correlate(records, logs, entity_type=entity_type)

    async def load_stock_sessions(
        self,
        selected_branch_id: int | None = None,
        business_date: str | None = None,
    ) -> list[StockCountSession]:
        entries = await self.load_annotated(STOCK_ENTRY, selected_branch_id)
        return group_stock_entries(filter_by_date(entries, business_date))

    def can_undo(self, record: AnnotatedRecord) -> bool:
        return can_undo(record, self.actor, policies=self.policies)

    async def undo_record(self, record: AnnotatedRecord) -> UndoOutcome:
        if record.log_id is None:
            raise ValueError(f"Record {record.id} has no create log to undo")
        return await self.undo_executor().undo(record.log_id)

    async def undo_session(self, session: StockCountSession) -> SessionUndoResult:
        return await undo_session(self.undo_executor(), session, self.actor, policies=self.policies)

    def _log_fetch_failure(self, entity_type: str, action: str, error: Exception) -> None:
        log_action(
            logger,
            module=entity_type,
            action=action,
            actor_role=self.actor.role,
            branch_id=self.actor.branch_id,
            outcome="degraded",
            level=logging.WARNING,
            error=str(error),
        )
