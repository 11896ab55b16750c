"""Catalog filtering, sorting and search helpers"""

import unicodedata
from collections import Counter
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

from ..models.criteria import FilterCriteria, SortField, SortOrder, is_wildcard
from ..models.document import NO_TENANT, Document
from ..models.schemas import CatalogFacets

SUGGESTION_LIMIT = 5
RECENT_SEARCH_LIMIT = 5


def collation_key(value: str) -> Tuple[str, str]:
    """
    Sort key approximating a locale-aware comparison.

    Accents and case are ignored on the primary level; the raw string breaks
    ties so only identical strings compare equal.
    """
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), value


def _matches_search(document: Document, term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    return (
        needle in document.name.lower()
        or needle in document.property.lower()
        or needle in document.tenant.lower()
        or any(needle in tag.lower() for tag in document.tags)
    )


def _matches_category(document: Document, category) -> bool:
    return is_wildcard(category) or document.category.lower() == category.lower()


def _matches_exact(value: str, expected) -> bool:
    return is_wildcard(expected) or value == expected


def _matches_dates(document: Document, criteria: FilterCriteria) -> bool:
    if criteria.date_from is not None and document.upload_date < criteria.date_from:
        return False
    if criteria.date_to is not None and document.upload_date > criteria.date_to:
        return False
    return True


def _matches_tags(document: Document, required: Iterable[str]) -> bool:
    present = set(document.tags)
    return all(tag in present for tag in required)


def matches(document: Document, criteria: FilterCriteria) -> bool:
    """True when ``document`` satisfies every predicate of ``criteria``."""
    return (
        _matches_search(document, criteria.search_term)
        and _matches_category(document, criteria.category)
        and _matches_exact(document.status, criteria.status)
        and _matches_exact(document.property, criteria.property)
        and _matches_exact(document.tenant, criteria.tenant)
        and _matches_dates(document, criteria)
        and _matches_tags(document, criteria.tags)
    )


# Size is compared as its display string ("2.4 MB" vs "456 KB"), not as a byte count.
SORT_KEYS: Dict[SortField, Callable[[Document], Any]] = {
    SortField.UPLOAD_DATE: lambda doc: doc.upload_date,
    SortField.NAME: lambda doc: collation_key(doc.name),
    SortField.SIZE: lambda doc: collation_key(doc.size),
    SortField.STATUS: lambda doc: collation_key(doc.status),
    SortField.CATEGORY: lambda doc: collation_key(doc.category),
}


def sort_documents(documents: Iterable[Document], sort_by: SortField, sort_order: SortOrder) -> List[Document]:
    """Stable sort; equal keys keep their incoming order in both directions."""
    return sorted(documents, key=SORT_KEYS[sort_by], reverse=sort_order is SortOrder.DESC)


def query_documents(snapshot: Sequence[Document], criteria: FilterCriteria) -> List[Document]:
    """Filter ``snapshot`` with ``criteria`` and order the result."""
    filtered = [document for document in snapshot if matches(document, criteria)]
    return sort_documents(filtered, criteria.sort_by, criteria.sort_order)


def has_active_filters(criteria: FilterCriteria) -> bool:
    return bool(
        criteria.search_term
        or not is_wildcard(criteria.category)
        or not is_wildcard(criteria.status)
        or not is_wildcard(criteria.property)
        or not is_wildcard(criteria.tenant)
        or criteria.date_from
        or criteria.date_to
        or criteria.tags
    )


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def collect_facets(snapshot: Sequence[Document]) -> CatalogFacets:
    """Distinct filter values present in the catalog, in first-seen order."""
    return CatalogFacets(
        statuses=_unique(doc.status for doc in snapshot),
        properties=_unique(doc.property for doc in snapshot),
        tenants=_unique(doc.tenant for doc in snapshot if doc.tenant != NO_TENANT),
        tags=_unique(tag for doc in snapshot for tag in doc.tags),
        category_counts=dict(Counter(doc.category for doc in snapshot)),
    )


def suggest_terms(snapshot: Sequence[Document], term: str, limit: int = SUGGESTION_LIMIT) -> List[str]:
    """Names, properties, tags and categories containing ``term``."""
    if not term:
        return []
    needle = term.lower()
    suggestions: Dict[str, None] = {}
    for document in snapshot:
        candidates = [document.name, document.property, *document.tags, document.category]
        for candidate in candidates:
            if needle in candidate.lower():
                suggestions.setdefault(candidate)
    return list(suggestions)[:limit]


class RecentSearches:
    """Most recent search terms first, without duplicates."""

    def __init__(self, limit: int = RECENT_SEARCH_LIMIT):
        self.limit = limit
        self._terms: List[str] = []

    def record(self, term: str) -> None:
        if not term.strip():
            return
        self._terms = [term, *[existing for existing in self._terms if existing != term]][:self.limit]

    def remove(self, index: int) -> str:
        return self._terms.pop(index)

    def items(self) -> List[str]:
        return list(self._terms)
