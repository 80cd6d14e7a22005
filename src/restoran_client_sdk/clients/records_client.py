from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..entity_types import collection_path, record_model
from ..models_records import DomainRecord
from .base import BaseClient


@dataclass
class RecordsClient(BaseClient):
    async def list_records(
        self,
        entity_type: str,
        branch_id: int | None = None,
        **params: Any,
    ) -> list[DomainRecord]:
        query = {key: value for key, value in {"branch_id": branch_id, **params}.items() if value is not None}
        payload = await self._request(
            "GET",
            collection_path(entity_type),
            params=query,
            module="records",
            operation=f"list_{entity_type}",
        )
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ValueError(f"Expected {entity_type} list response to be a JSON array")
        model = record_model(entity_type)
        return [model.model_validate({**item, "entity_type": entity_type}) for item in payload]
