"""Data models for the document catalog."""

from .criteria import FilterCriteria, SortField, SortOrder
from .document import Document, DocumentPatch, NewDocument
from .schemas import BatchAction, BatchResult, CatalogFacets, CatalogStats, ExportFormat, ExportPayload
from .upload import (
    DEFAULT_VALIDATION_CONFIG,
    FileRef,
    SubmitResult,
    TaskEvent,
    TaskEventType,
    UploadStatus,
    UploadTask,
    ValidationConfig,
    ValidationResult,
)

__all__ = [
    "BatchAction",
    "BatchResult",
    "CatalogFacets",
    "CatalogStats",
    "DEFAULT_VALIDATION_CONFIG",
    "Document",
    "DocumentPatch",
    "ExportFormat",
    "ExportPayload",
    "FileRef",
    "FilterCriteria",
    "NewDocument",
    "SortField",
    "SortOrder",
    "SubmitResult",
    "TaskEvent",
    "TaskEventType",
    "UploadStatus",
    "UploadTask",
    "ValidationConfig",
    "ValidationResult",
]
