"""Result models returned by the catalog services and the HTTP API"""

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .document import Document


class BatchAction(str, Enum):
    DELETE = "delete"
    ARCHIVE = "archive"
    DOWNLOAD = "download"
    SHARE = "share"
    TAG = "tag"


class BatchResult(BaseModel):
    """Outcome of one bulk action"""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    action: BatchAction
    success: bool = True
    message: str
    affected_ids: List[int] = Field(default_factory=list)
    missing_ids: List[int] = Field(default_factory=list)
    documents: List[Document] = Field(default_factory=list)
    share_text: Optional[str] = None


class CatalogFacets(BaseModel):
    """Distinct values available to the filter panel"""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    statuses: List[str]
    properties: List[str]
    tenants: List[str]
    tags: List[str]
    category_counts: Dict[str, int]


class CatalogStats(BaseModel):
    """Dashboard analytics over the catalog"""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    as_of: date
    total_documents: int
    total_size_mb: float
    storage_usage_percent: float
    status_counts: Dict[str, int]
    category_counts: Dict[str, int]
    active_documents: int
    recent_uploads: int
    expiring_soon: int
    recent_documents: List[Document]


class ExportFormat(str, Enum):
    CSV = "csv"
    HTML = "html"
    JSON = "json"


class ExportPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    filename: str
    media_type: str
    content: str
    document_count: int


class RenameRequest(BaseModel):
    name: str


class FolderRequest(BaseModel):
    name: str


class BatchRequest(BaseModel):
    action: BatchAction
    ids: List[int] = Field(default_factory=list)
    tags: Optional[List[str]] = None
