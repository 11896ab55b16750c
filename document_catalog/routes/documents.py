"""Catalog query and document management routes"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..errors import DocumentNotFoundError, InvalidBatchActionError
from ..models.criteria import FilterCriteria
from ..models.document import Document
from ..models.schemas import (
    BatchRequest,
    BatchResult,
    CatalogFacets,
    CatalogStats,
    ExportFormat,
    FolderRequest,
    RenameRequest,
)
from ..services.catalog_service import DocumentCatalog
from ..utils.logging import logger
from ..utils.notifications import Notification
from .dependencies import get_catalog

router = APIRouter(prefix="/api/v1", tags=["Documents"])


@router.get("/documents/", response_model=List[Document], response_model_exclude_none=True)
async def list_documents(catalog: DocumentCatalog = Depends(get_catalog)):
    return catalog.documents()


@router.post("/documents/query", response_model=List[Document], response_model_exclude_none=True)
async def query_documents(criteria: FilterCriteria, catalog: DocumentCatalog = Depends(get_catalog)):
    results = catalog.query(criteria)
    logger.log_step("documents_queried", {
        "search_term": criteria.search_term,
        "sort_by": criteria.sort_by.value,
        "result_count": len(results)
    })
    return results


@router.get("/documents/facets", response_model=CatalogFacets)
async def document_facets(catalog: DocumentCatalog = Depends(get_catalog)):
    return catalog.facets()


@router.get("/documents/suggestions", response_model=List[str])
async def search_suggestions(q: str = "", catalog: DocumentCatalog = Depends(get_catalog)):
    return catalog.suggestions(q)


@router.get("/documents/recent-searches", response_model=List[str])
async def recent_searches(catalog: DocumentCatalog = Depends(get_catalog)):
    return catalog.recent_searches.items()


@router.get("/documents/analytics", response_model=CatalogStats, response_model_exclude_none=True)
async def document_analytics(catalog: DocumentCatalog = Depends(get_catalog)):
    return catalog.analytics()


@router.get("/documents/export")
async def export_documents(
    export_format: ExportFormat = Query(ExportFormat.CSV, alias="format"),
    catalog: DocumentCatalog = Depends(get_catalog),
):
    payload = catalog.export(export_format)
    return Response(
        content=payload.content,
        media_type=payload.media_type,
        headers={"Content-Disposition": f'attachment; filename="{payload.filename}"'},
    )


@router.post("/documents/folders", response_model=Document, response_model_exclude_none=True, status_code=201)
async def create_folder(request: FolderRequest, catalog: DocumentCatalog = Depends(get_catalog)):
    try:
        return await catalog.create_folder(request.name)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))


@router.post("/documents/batch", response_model=BatchResult, response_model_exclude_none=True)
async def bulk_action(request: BatchRequest, catalog: DocumentCatalog = Depends(get_catalog)):
    try:
        return await catalog.apply(request.action, request.ids, request.tags)
    except InvalidBatchActionError as exc:
        logger.log_error("bulk_action_rejected", {"action": request.action.value, "error": str(exc)})
        raise HTTPException(status_code=400, detail=str(exc))


@router.patch("/documents/{document_id}", response_model=Document, response_model_exclude_none=True)
async def rename_document(document_id: int, request: RenameRequest, catalog: DocumentCatalog = Depends(get_catalog)):
    try:
        return await catalog.rename(document_id, request.name)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))


@router.delete("/documents/{document_id}", response_model=Document, response_model_exclude_none=True)
async def delete_document(document_id: int, catalog: DocumentCatalog = Depends(get_catalog)):
    try:
        return await catalog.delete(document_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/notifications", response_model=List[Notification], tags=["Notifications"])
async def list_notifications(catalog: DocumentCatalog = Depends(get_catalog)):
    return catalog.notifier.history()
