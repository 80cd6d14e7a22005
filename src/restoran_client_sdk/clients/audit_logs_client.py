from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import UndoRejectedError, ValidationError
from ..models_audit import AuditLogEntry, LogScope, UndoResponse
from .base import BaseClient


@dataclass
class AuditLogClient(BaseClient):
    async def fetch(self, entity_type: str | None, scope: LogScope | None = None) -> list[AuditLogEntry]:
        """Return every log entry matching the query in one request.

        The server answers newest first and does not paginate.
        """
        params = (scope or LogScope()).to_params(entity_type)
        payload = await self._request(
            "GET",
            "/audit-logs",
            params=params,
            module="audit_logs",
            operation="fetch",
        )
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ValueError("Expected audit log response to be a JSON array")
        return [AuditLogEntry.model_validate(item) for item in payload]

    async def undo(self, log_id: int) -> UndoResponse:
        try:
            payload = await self._request(
                "POST",
                f"/audit-logs/{log_id}/undo",
                module="audit_logs",
                operation="undo",
            )
        except ValidationError as exc:
            raise UndoRejectedError(**exc.__dict__) from exc
        if payload is None:
            return UndoResponse()
        if not isinstance(payload, dict):
            raise ValueError("Expected undo response to be a JSON object")
        return UndoResponse.model_validate(payload)
