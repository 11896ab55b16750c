"""Query criteria for catalog searches"""

from datetime import date
from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

WILDCARD = "all"


class SortField(str, Enum):
    UPLOAD_DATE = "uploadDate"
    NAME = "name"
    SIZE = "size"
    STATUS = "status"
    CATEGORY = "category"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class FilterCriteria(BaseModel):
    """
    One catalog query.

    ``category``, ``status``, ``property`` and ``tenant`` accept a concrete
    value or the wildcard ``"all"``; empty strings and ``None`` also mean
    "no constraint". ``tags`` are matched all-of.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    search_term: str = ""
    category: Optional[str] = WILDCARD
    status: Optional[str] = WILDCARD
    property: Optional[str] = WILDCARD
    tenant: Optional[str] = WILDCARD
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    tags: FrozenSet[str] = frozenset()
    sort_by: SortField = SortField.UPLOAD_DATE
    sort_order: SortOrder = SortOrder.DESC

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value):
        return frozenset() if value is None else value


def is_wildcard(value: Optional[str]) -> bool:
    return value is None or value == "" or value.lower() == WILDCARD
