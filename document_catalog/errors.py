"""Exceptions raised by the document catalog core."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class DocumentNotFoundError(CatalogError):
    """Raised when a document id is not present in the catalog."""

    def __init__(self, document_id: int):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class TaskNotFoundError(CatalogError):
    """Raised when an upload task id is unknown to the pipeline."""

    def __init__(self, task_id: str):
        super().__init__(f"Upload task {task_id} not found")
        self.task_id = task_id


class InvalidTaskStateError(CatalogError):
    """Raised when a task operation is not allowed in the task's current state."""


class InvalidBatchActionError(CatalogError, ValueError):
    """Raised for unknown bulk actions or actions missing required input."""
