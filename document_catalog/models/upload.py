"""Upload batch and task models"""

from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

MEBIBYTE = 1024 * 1024

DEFAULT_ALLOWED_MIME_TYPES = frozenset({
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
})


class FileRef(BaseModel):
    """Reference to a candidate file: name, size in bytes and declared MIME type."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    name: str
    size: int = Field(..., ge=0)
    mime_type: str = ""


class ValidationConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    max_size_bytes: int = Field(default=10 * MEBIBYTE, gt=0)
    allowed_mime_types: FrozenSet[str] = DEFAULT_ALLOWED_MIME_TYPES
    max_files: int = Field(default=10, gt=0)


DEFAULT_VALIDATION_CONFIG = ValidationConfig()


class ValidationResult(BaseModel):
    accepted: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class UploadStatus(str, Enum):
    UPLOADING = "uploading"
    COMPLETED = "completed"
    ERROR = "error"


class UploadTask(BaseModel):
    """Visible state of one file's simulated transfer."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: str
    file: FileRef
    progress: int = Field(default=0, ge=0, le=100)
    status: UploadStatus = UploadStatus.UPLOADING
    error: Optional[str] = None
    attempts: int = 1
    document_id: Optional[int] = None


class TaskEventType(str, Enum):
    PROGRESS = "progress"
    COMPLETED = "completed"
    ERROR = "error"
    REMOVED = "removed"


class TaskEvent(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    type: TaskEventType
    progress: int
    status: UploadStatus
    error: Optional[str] = None
    document_id: Optional[int] = None


class SubmitResult(ValidationResult):
    """Validation outcome of a submitted batch plus the tasks started for it."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    task_ids: List[str] = Field(default_factory=list)
