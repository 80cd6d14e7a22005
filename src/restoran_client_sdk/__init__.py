from .activity import fetch_user_activity, filter_by_month
from .bulk_import import BulkImportController, BulkImportHandle, classify_outcome, is_timeout_error
from .bulk_import_validation import ClientValidationError, ValidationIssue, validate_bulk_import_request
from .cancellation import CancellationToken
from .clients import AuditLogClient, BulkImportClient, RecordsClient
from .config import ClientConfig, ConfigError, load_config
from .correlation import correlate, index_create_logs
from .exceptions import (
    ApiError,
    ForbiddenError,
    GatewayTimeoutError,
    NotFoundError,
    RequestCancelledError,
    RequestTimeoutError,
    TransportError,
    UnauthorizedError,
    UndoRejectedError,
    ValidationError,
)
from .http_client import HttpClient
from .models_audit import AuditAction, AuditLogEntry, LogScope
from .models_bulk_import import (
    BulkImportRequest,
    BulkImportResponse,
    CancellableOperationState,
    OperationStatus,
)
from .models_records import Actor, AnnotatedRecord, DomainRecord, StockEntry, UserRole
from .scope import resolve_log_scope, resolve_record_branch
from .session import BackOfficeSession
from .stock_sessions import (
    SessionUndoResult,
    StockCountSession,
    group_stock_entries,
    session_key,
    undo_session,
    undoable_entries,
)
from .undo_executor import UndoExecutor, UndoOutcome
from .undo_policy import DEFAULT_UNDO_POLICIES, UndoPolicy, can_undo

__version__ = "0.1.0"

__all__ = [
    "Actor",
    "AnnotatedRecord",
    "ApiError",
    "AuditAction",
    "AuditLogClient",
    "AuditLogEntry",
    "BackOfficeSession",
    "BulkImportClient",
    "BulkImportController",
    "BulkImportHandle",
    "BulkImportRequest",
    "BulkImportResponse",
    "CancellableOperationState",
    "CancellationToken",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "DEFAULT_UNDO_POLICIES",
    "DomainRecord",
    "ForbiddenError",
    "GatewayTimeoutError",
    "HttpClient",
    "LogScope",
    "NotFoundError",
    "OperationStatus",
    "RecordsClient",
    "RequestCancelledError",
    "RequestTimeoutError",
    "SessionUndoResult",
    "StockCountSession",
    "StockEntry",
    "TransportError",
    "UnauthorizedError",
    "UndoExecutor",
    "UndoOutcome",
    "UndoPolicy",
    "UndoRejectedError",
    "UserRole",
    "ValidationError",
    "ValidationIssue",
    "can_undo",
    "classify_outcome",
    "correlate",
    "fetch_user_activity",
    "filter_by_month",
    "group_stock_entries",
    "index_create_logs",
    "is_timeout_error",
    "load_config",
    "resolve_log_scope",
    "resolve_record_branch",
    "session_key",
    "undo_session",
    "undoable_entries",
    "validate_bulk_import_request",
]
