from .audit_logs_client import AuditLogClient
from .bulk_import_client import BulkImportClient
from .records_client import RecordsClient

__all__ = [
    "AuditLogClient",
    "BulkImportClient",
    "RecordsClient",
]
