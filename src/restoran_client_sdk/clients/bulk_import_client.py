from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..bulk_import_validation import validate_bulk_import_request
from ..cancellation import CancellationToken
from ..models_bulk_import import BulkImportRequest, BulkImportResponse
from .base import BaseClient


@dataclass
class BulkImportClient(BaseClient):
    async def import_b2b_products(
        self,
        payload: BulkImportRequest | Mapping[str, Any],
        *,
        cancel_token: CancellationToken | None = None,
    ) -> BulkImportResponse:
        request = validate_bulk_import_request(payload)
        data = await self._request(
            "POST",
            "/admin/products/bulk-import-b2b",
            json_body=request.model_dump(mode="json"),
            timeout=self.http.config.bulk_import_timeout_seconds,
            cancel_token=cancel_token,
            module="bulk_import",
            operation="import_b2b_products",
        )
        if data is None:
            return BulkImportResponse()
        if not isinstance(data, dict):
            raise ValueError("Expected bulk import response to be a JSON object")
        return BulkImportResponse.model_validate(data)
