import time
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from ..errors import InvalidTaskStateError, TaskNotFoundError
from ..models.upload import FileRef, SubmitResult, UploadTask
from ..services.catalog_service import DocumentCatalog
from ..utils.logging import logger
from .dependencies import get_catalog

router = APIRouter(prefix="/api/v1", tags=["Uploads"])


@router.post("/uploads/", response_model=SubmitResult)
async def upload_documents(
    request: Request,
    files: List[UploadFile] = File(...),
    uploaded_by: Optional[str] = Form(None),
    catalog: DocumentCatalog = Depends(get_catalog),
):
    start_time = time.time()

    logger.log_step("upload_request_received", {
        "method": request.method,
        "url": str(request.url),
        "client": request.client.host if request.client else "unknown",
        "file_count": len(files)
    })

    if not files:
        raise HTTPException(status_code=400, detail="At least one file must be uploaded.")

    file_refs = []
    for upload in files:
        content = await upload.read()
        file_refs.append(FileRef(
            name=upload.filename or f"upload-{uuid.uuid4().hex}",
            size=len(content),
            mime_type=upload.content_type or "",
        ))

    result = await catalog.submit_batch(file_refs, uploaded_by=uploaded_by)

    process_time = time.time() - start_time
    if not result.accepted:
        logger.log_error("upload_validation_error", {
            "errors": result.errors,
            "process_time": process_time
        })
        raise HTTPException(
            status_code=400,
            detail={"errors": result.errors, "warnings": result.warnings},
        )

    logger.log_step("upload_tasks_started", {
        "task_count": len(result.task_ids),
        "process_time": process_time
    })
    return result


@router.get("/uploads/tasks", response_model=List[UploadTask])
async def list_tasks(catalog: DocumentCatalog = Depends(get_catalog)):
    return catalog.tasks()


@router.post("/uploads/tasks/{task_id}/retry", response_model=UploadTask)
async def retry_task(task_id: str, catalog: DocumentCatalog = Depends(get_catalog)):
    try:
        return catalog.retry(task_id)
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except InvalidTaskStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@router.delete("/uploads/tasks/{task_id}", response_model=UploadTask)
async def remove_task(task_id: str, catalog: DocumentCatalog = Depends(get_catalog)):
    try:
        return catalog.remove_task(task_id)
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "agent": "document_catalog"
    }
