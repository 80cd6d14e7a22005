from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .models_bulk_import import BulkImportRequest

ALLOWED_PREFIXES = frozenset({"TM", "CD"})
MAX_PRODUCT_NUMBER = 9999
DEFAULT_DELAY_MS = 500
MAX_DELAY_MS = 10000


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        return f"{issue.field}: {issue.reason}"


def validate_bulk_import_request(payload: BulkImportRequest | Mapping[str, Any]) -> BulkImportRequest:
    """Check a bulk import request against the server's limits before sending it."""
    request = _coerce_request(payload)
    prefix = request.prefix.strip().upper()
    issues: list[ValidationIssue] = []
    if prefix not in ALLOWED_PREFIXES:
        issues.append(ValidationIssue("prefix", "prefix must be 'TM' or 'CD'"))
    if request.start < 0 or request.end < 0:
        issues.append(ValidationIssue("start", "start and end must be zero or positive"))
    elif request.start > request.end:
        issues.append(ValidationIssue("start", "start must not be greater than end"))
    if request.end > MAX_PRODUCT_NUMBER:
        issues.append(ValidationIssue("end", f"end must be at most {MAX_PRODUCT_NUMBER}"))
    if request.delay_ms > MAX_DELAY_MS:
        issues.append(ValidationIssue("delay_ms", f"delay_ms must be at most {MAX_DELAY_MS}"))
    if issues:
        raise ClientValidationError(issues)
    delay_ms = request.delay_ms if request.delay_ms >= 0 else DEFAULT_DELAY_MS
    return request.model_copy(update={"prefix": prefix, "delay_ms": delay_ms})


def _coerce_request(payload: BulkImportRequest | Mapping[str, Any]) -> BulkImportRequest:
    if isinstance(payload, BulkImportRequest):
        return payload
    try:
        return BulkImportRequest.model_validate(payload)
    except PydanticValidationError as exc:
        issue = exc.errors()[0] if exc.errors() else {"loc": ("payload",), "msg": "Invalid request"}
        field = ".".join(str(part) for part in issue.get("loc", ("payload",)))
        raise ClientValidationError([ValidationIssue(field, issue.get("msg", "Invalid request"))]) from exc
