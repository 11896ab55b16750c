"""In-memory document catalog with simulated ingestion, queries and bulk actions."""

from .services.catalog_service import DocumentCatalog, build_catalog

__all__ = ["DocumentCatalog", "build_catalog"]
