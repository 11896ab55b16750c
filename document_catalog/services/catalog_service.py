"""Entry point used by presentation layers to drive the document catalog"""

import random
from typing import Callable, Iterable, List, Optional, Sequence

from ..config import Settings
from ..models.criteria import FilterCriteria
from ..models.document import Document, DocumentPatch, NewDocument
from ..models.schemas import BatchResult, CatalogFacets, CatalogStats, ExportFormat, ExportPayload
from ..models.upload import DEFAULT_VALIDATION_CONFIG, FileRef, SubmitResult, UploadTask, ValidationConfig
from ..utils.clock import Clock
from ..utils.logging import logger
from ..utils.notifications import NotificationFeed, NotificationLevel
from .analytics_service import summarize_catalog
from .batch_service import BatchOperationCoordinator, ShareHandler
from .catalog_store import CatalogStore
from .export_service import export_documents
from .ingestion_service import IngestionPipeline, TaskListener, TransferPlanner
from .query_service import RecentSearches, collect_facets, query_documents, suggest_terms
from .sample_data import sample_documents
from .validation_service import validate_files

FOLDER_CATEGORY = "Folders"

EXPORT_MESSAGES = {
    ExportFormat.CSV: "Exported {count} documents to CSV",
    ExportFormat.HTML: "Generated document report for {count} documents",
    ExportFormat.JSON: "Created archive manifest for {count} documents",
}


class DocumentCatalog:
    """Wires validation, ingestion, querying and bulk actions around one catalog store."""

    def __init__(
        self,
        store: Optional[CatalogStore] = None,
        notifier: Optional[NotificationFeed] = None,
        clock: Optional[Clock] = None,
        planner: Optional[TransferPlanner] = None,
        validation_config: ValidationConfig = DEFAULT_VALIDATION_CONFIG,
        default_uploader: str = "Current User",
        completed_ttl: Optional[float] = 3.0,
        share_handler: Optional[ShareHandler] = None,
    ):
        self.store = store if store is not None else CatalogStore()
        self.notifier = notifier if notifier is not None else NotificationFeed()
        self.clock = clock or Clock()
        self.validation_config = validation_config
        self.default_uploader = default_uploader
        self.pipeline = IngestionPipeline(
            self.store,
            clock=self.clock,
            planner=planner,
            completed_ttl=completed_ttl,
            on_completed=self._upload_completed,
            on_failed=self._upload_failed,
        )
        self.coordinator = BatchOperationCoordinator(self.store, self.notifier, share_handler)
        self.recent_searches = RecentSearches()

    # ---------------------------------------------------------------- uploads

    async def submit_batch(
        self,
        files: Sequence[FileRef],
        config: Optional[ValidationConfig] = None,
        uploaded_by: Optional[str] = None,
    ) -> SubmitResult:
        """
        Validate a batch and start one upload task per file.

        Each validation error and warning becomes its own notification. If
        any error is present no task is started for any file of the batch.
        """
        validation = validate_files(files, config or self.validation_config)

        for error in validation.errors:
            self.notifier.notify(error, NotificationLevel.ERROR)
        for warning in validation.warnings:
            self.notifier.notify(warning, NotificationLevel.WARNING)

        if not validation.accepted:
            logger.log_error("batch_rejected", {
                "file_count": len(files),
                "errors": validation.errors
            })
            return SubmitResult(**validation.model_dump())

        uploader = uploaded_by or self.default_uploader
        task_ids = [self.pipeline.start(file, uploader) for file in files]
        return SubmitResult(**validation.model_dump(), task_ids=task_ids)

    def on_task_event(self, listener: TaskListener) -> Callable[[], None]:
        return self.pipeline.subscribe(listener)

    def tasks(self) -> List[UploadTask]:
        return self.pipeline.tasks()

    def retry(self, task_id: str) -> UploadTask:
        return self.pipeline.retry(task_id)

    def remove_task(self, task_id: str) -> UploadTask:
        return self.pipeline.remove(task_id)

    def _upload_completed(self, task: UploadTask, document: Document) -> None:
        self.notifier.notify(f'"{task.file.name}" uploaded successfully', NotificationLevel.SUCCESS)

    def _upload_failed(self, task: UploadTask) -> None:
        self.notifier.notify(f'Failed to upload "{task.file.name}": {task.error}', NotificationLevel.ERROR)

    # ---------------------------------------------------------------- queries

    def documents(self) -> List[Document]:
        return list(self.store.list())

    def query(self, criteria: Optional[FilterCriteria] = None) -> List[Document]:
        criteria = criteria or FilterCriteria()
        if criteria.search_term.strip():
            self.recent_searches.record(criteria.search_term)
        return query_documents(self.store.list(), criteria)

    def facets(self) -> CatalogFacets:
        return collect_facets(self.store.list())

    def suggestions(self, term: str) -> List[str]:
        return suggest_terms(self.store.list(), term)

    def analytics(self) -> CatalogStats:
        return summarize_catalog(self.store.list(), self.clock.today())

    def export(self, export_format: ExportFormat, criteria: Optional[FilterCriteria] = None) -> ExportPayload:
        export_format = ExportFormat(export_format)
        documents = self.query(criteria) if criteria is not None else self.documents()
        payload = export_documents(documents, export_format, self.clock.today())
        self.notifier.notify(
            EXPORT_MESSAGES[export_format].format(count=payload.document_count),
            NotificationLevel.SUCCESS,
        )
        return payload

    # -------------------------------------------------------------- mutations

    async def apply(self, action, ids: Iterable[int], tags: Optional[Iterable[str]] = None) -> BatchResult:
        return await self.coordinator.apply(action, ids, tags)

    async def rename(self, document_id: int, new_name: str) -> Document:
        """Rename a document. Blank names are rejected; an unchanged name is a no-op."""
        name = new_name.strip()
        if not name:
            raise ValueError("Document name cannot be empty.")

        current = self.store.get(document_id)
        if name == current.name:
            return current

        renamed = await self.store.update(document_id, DocumentPatch(name=name))
        self.notifier.notify(f'Renamed "{current.name}" to "{name}"', NotificationLevel.SUCCESS)
        return renamed

    async def create_folder(self, name: str) -> Document:
        folder_name = name.strip()
        if not folder_name:
            raise ValueError("Folder name cannot be empty.")

        folder = await self.store.create(NewDocument(
            name=folder_name,
            doc_type="folder",
            category=FOLDER_CATEGORY,
            file_type="folder",
            size="0 Bytes",
            upload_date=self.clock.today(),
            status="active",
            item_count=0,
        ))
        self.notifier.notify(f"Created folder: {folder_name}", NotificationLevel.SUCCESS)
        return folder

    async def delete(self, document_id: int) -> Document:
        removed = await self.store.delete(document_id)
        self.notifier.notify(f'Deleted "{removed.name}"', NotificationLevel.SUCCESS)
        return removed

    async def shutdown(self) -> None:
        await self.pipeline.shutdown()


def build_catalog(settings: Settings, clock: Optional[Clock] = None, rng: Optional[random.Random] = None) -> DocumentCatalog:
    """Assemble a catalog from service settings."""
    planner = TransferPlanner(
        min_duration=settings.UPLOAD_MIN_DURATION_SECONDS,
        max_duration=settings.UPLOAD_MAX_DURATION_SECONDS,
        tick_interval=settings.UPLOAD_PROGRESS_TICK_SECONDS,
        max_increment=settings.UPLOAD_MAX_PROGRESS_INCREMENT,
        failure_rate=settings.UPLOAD_FAILURE_RATE,
        rng=rng,
    )
    store = CatalogStore(sample_documents() if settings.SEED_SAMPLE_DOCUMENTS else ())

    catalog = DocumentCatalog(
        store=store,
        notifier=NotificationFeed(history_size=settings.NOTIFICATION_HISTORY_SIZE),
        clock=clock,
        planner=planner,
        validation_config=settings.validation_config,
        default_uploader=settings.DEFAULT_UPLOADER,
        completed_ttl=settings.COMPLETED_TASK_TTL_SECONDS,
    )
    logger.log_step("catalog_initialized", {
        "documents": len(store),
        "max_files": settings.MAX_FILES_PER_BATCH,
        "max_size_bytes": settings.MAX_FILE_SIZE_BYTES,
        "failure_rate": settings.UPLOAD_FAILURE_RATE
    })
    return catalog
