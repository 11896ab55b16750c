from fastapi import Request

from ..services.catalog_service import DocumentCatalog


def get_catalog(request: Request) -> DocumentCatalog:
    return request.app.state.catalog
