"""Dashboard statistics over a catalog snapshot"""

import re
from collections import Counter
from datetime import date, timedelta
from typing import Sequence

from ..models.document import Document
from ..models.schemas import CatalogStats

STORAGE_QUOTA_MB = 1000.0
RECENT_WINDOW_DAYS = 7
RECENT_DOCUMENT_LIMIT = 5
ACTIVE_STATUSES = ("signed", "active", "approved")

_SIZE_PATTERN = re.compile(r"^\s*([\d.]+)\s*([A-Za-z]*)\s*$")
_UNIT_TO_MB = {
    "bytes": 1 / (1024 * 1024),
    "b": 1 / (1024 * 1024),
    "kb": 1 / 1024,
    "mb": 1.0,
    "gb": 1024.0,
}


def size_to_mb(size: str) -> float:
    """Convert a display size such as ``"456 KB"`` to megabytes; unreadable sizes count as 0."""
    match = _SIZE_PATTERN.match(size)
    if not match:
        return 0.0
    try:
        value = float(match.group(1))
    except ValueError:
        return 0.0
    return value * _UNIT_TO_MB.get(match.group(2).lower() or "mb", 0.0)


def _add_one_month(day: date) -> date:
    year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
    for candidate in (day.day, 30, 29, 28):
        try:
            return day.replace(year=year, month=month, day=candidate)
        except ValueError:
            continue
    raise ValueError(f"Cannot add a month to {day}")


def summarize_catalog(snapshot: Sequence[Document], today: date) -> CatalogStats:
    total_size = sum(size_to_mb(document.size) for document in snapshot)
    status_counts = Counter(document.status for document in snapshot)
    recent_cutoff = today - timedelta(days=RECENT_WINDOW_DAYS)
    expiry_cutoff = _add_one_month(today)

    recent_documents = sorted(snapshot, key=lambda document: document.upload_date, reverse=True)

    return CatalogStats(
        as_of=today,
        total_documents=len(snapshot),
        total_size_mb=round(total_size, 2),
        storage_usage_percent=round(min(total_size / STORAGE_QUOTA_MB * 100, 100.0), 2),
        status_counts=dict(status_counts),
        category_counts=dict(Counter(document.category for document in snapshot)),
        active_documents=sum(status_counts.get(status, 0) for status in ACTIVE_STATUSES),
        recent_uploads=sum(1 for document in snapshot if document.upload_date >= recent_cutoff),
        expiring_soon=sum(
            1 for document in snapshot
            if document.expiry_date is not None and today <= document.expiry_date <= expiry_cutoff
        ),
        recent_documents=recent_documents[:RECENT_DOCUMENT_LIMIT],
    )
