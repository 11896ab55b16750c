"""Simulated per-file upload pipeline"""

import asyncio
import random
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..errors import InvalidTaskStateError, TaskNotFoundError
from ..models.document import Document, NewDocument
from ..models.upload import FileRef, TaskEvent, TaskEventType, UploadStatus, UploadTask
from ..utils.clock import Clock
from ..utils.logging import logger
from .catalog_store import CatalogStore
from .validation_service import format_file_size, get_file_category, get_file_type

MAX_PROGRESS_BEFORE_DONE = 95
UPLOAD_FAILED_MESSAGE = "Upload failed. Please try again."
UPLOADED_TAGS = ("uploaded", "new")
UPLOADED_STATUS = "uploaded"

TaskListener = Callable[[str, TaskEvent], None]


@dataclass(frozen=True)
class TransferPlan:
    duration: float
    fails: bool


class TransferPlanner:
    """Random timing and failure source for simulated transfers."""

    def __init__(
        self,
        min_duration: float = 1.0,
        max_duration: float = 4.0,
        tick_interval: float = 0.2,
        max_increment: int = 15,
        failure_rate: float = 0.05,
        rng: Optional[random.Random] = None,
    ):
        if min_duration < 0 or max_duration < min_duration:
            raise ValueError("Upload duration range is invalid")
        if tick_interval <= 0:
            raise ValueError("Tick interval must be positive")
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("Failure rate must be between 0 and 1")
        self.min_duration = min_duration
        self.max_duration = max_duration
        self.tick_interval = tick_interval
        self.max_increment = max_increment
        self.failure_rate = failure_rate
        self.rng = rng or random.Random()

    def plan(self) -> TransferPlan:
        """Roll the duration and the failure outcome for one attempt."""
        return TransferPlan(
            duration=self.rng.uniform(self.min_duration, self.max_duration),
            fails=self.rng.random() < self.failure_rate,
        )

    def increment(self) -> int:
        return self.rng.randint(0, self.max_increment)


class IngestionPipeline:
    """
    Runs one asyncio task per admitted file.

    A task ticks its progress up to 95 until the planned duration elapses,
    then either fails with a retryable error or completes and admits a new
    document to the catalog store.
    """

    def __init__(
        self,
        store: CatalogStore,
        clock: Optional[Clock] = None,
        planner: Optional[TransferPlanner] = None,
        completed_ttl: Optional[float] = 3.0,
        on_completed: Optional[Callable[[UploadTask, Document], None]] = None,
        on_failed: Optional[Callable[[UploadTask], None]] = None,
    ):
        self.store = store
        self.clock = clock or Clock()
        self.planner = planner or TransferPlanner()
        self.completed_ttl = completed_ttl
        self._on_completed = on_completed
        self._on_failed = on_failed
        self._tasks: Dict[str, UploadTask] = {}
        self._uploaders: Dict[str, str] = {}
        self._runners: Dict[str, asyncio.Task] = {}
        self._listeners: List[TaskListener] = []

    # ---------------------------------------------------------------- events

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """Register ``listener(task_id, event)``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, task: UploadTask, event_type: TaskEventType) -> None:
        event = TaskEvent(
            type=event_type,
            progress=task.progress,
            status=task.status,
            error=task.error,
            document_id=task.document_id,
        )
        for listener in list(self._listeners):
            try:
                listener(task.id, event)
            except Exception as exc:
                logger.log_error("task_listener_failed", {
                    "task_id": task.id,
                    "event": event_type.value,
                    "error": str(exc)
                })

    # ----------------------------------------------------------------- state

    def tasks(self) -> List[UploadTask]:
        """Copies of the visible tasks in start order."""
        return [task.model_copy(deep=True) for task in self._tasks.values()]

    def get(self, task_id: str) -> UploadTask:
        try:
            return self._tasks[task_id].model_copy(deep=True)
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    # ------------------------------------------------------------ operations

    def start(self, file: FileRef, uploaded_by: str) -> str:
        """Create a task for ``file`` and start its transfer. Returns the task id."""
        task = UploadTask(id=uuid.uuid4().hex, file=file)
        self._tasks[task.id] = task
        self._uploaders[task.id] = uploaded_by
        self._launch(task)
        logger.log_step("upload_task_started", {
            "task_id": task.id,
            "filename": file.name,
            "size_bytes": file.size
        })
        return task.id

    def retry(self, task_id: str) -> UploadTask:
        """Re-arm a failed task with a fresh timing and failure roll."""
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        if task.status is not UploadStatus.ERROR:
            raise InvalidTaskStateError(f"Upload task {task_id} is {task.status.value}, only failed tasks can be retried")

        task.status = UploadStatus.UPLOADING
        task.progress = 0
        task.error = None
        task.attempts += 1
        self._launch(task)
        logger.log_step("upload_task_retried", {"task_id": task_id, "attempt": task.attempts})
        return task.model_copy(deep=True)

    def remove(self, task_id: str) -> UploadTask:
        """Drop a task from the visible set, stopping its transfer if it is still running."""
        task = self._tasks.pop(task_id, None)
        if task is None:
            raise TaskNotFoundError(task_id)
        self._uploaders.pop(task_id, None)

        runner = self._runners.pop(task_id, None)
        if runner is not None and not runner.done() and runner is not asyncio.current_task():
            runner.cancel()

        self._emit(task, TaskEventType.REMOVED)
        logger.log_step("upload_task_removed", {"task_id": task_id, "status": task.status.value})
        return task

    async def join(self) -> None:
        """Wait until no transfer is running, including ones started while waiting."""
        while True:
            pending = [runner for runner in self._runners.values() if not runner.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel every running transfer."""
        runners = list(self._runners.values())
        for runner in runners:
            runner.cancel()
        await asyncio.gather(*runners, return_exceptions=True)
        self._runners.clear()

    # --------------------------------------------------------------- runner

    def _launch(self, task: UploadTask) -> None:
        runner = asyncio.get_running_loop().create_task(self._run(task))
        self._runners[task.id] = runner
        runner.add_done_callback(lambda done, task_id=task.id: self._forget_runner(task_id, done))

    def _forget_runner(self, task_id: str, runner: asyncio.Task) -> None:
        if self._runners.get(task_id) is runner:
            del self._runners[task_id]

    def _is_removed(self, task: UploadTask) -> bool:
        return self._tasks.get(task.id) is not task

    async def _run(self, task: UploadTask) -> None:
        plan = self.planner.plan()
        uploaded_by = self._uploaders.get(task.id, "Unknown")
        tick = self.planner.tick_interval
        elapsed = 0.0

        while elapsed + tick < plan.duration:
            await self.clock.sleep(tick)
            if self._is_removed(task):
                return
            elapsed += tick
            task.progress = min(task.progress + self.planner.increment(), MAX_PROGRESS_BEFORE_DONE)
            self._emit(task, TaskEventType.PROGRESS)
            # A listener may have removed the task while handling the event.
            if self._is_removed(task):
                return

        await self.clock.sleep(plan.duration - elapsed)
        if self._is_removed(task):
            return

        if plan.fails:
            task.status = UploadStatus.ERROR
            task.error = UPLOAD_FAILED_MESSAGE
            logger.log_error("upload_task_failed", {
                "task_id": task.id,
                "filename": task.file.name,
                "attempt": task.attempts
            })
            self._emit(task, TaskEventType.ERROR)
            if self._on_failed is not None:
                self._on_failed(task.model_copy(deep=True))
            return

        task.progress = 100
        task.status = UploadStatus.COMPLETED
        # Once the transfer is done the document is admitted even if the task is removed meanwhile.
        document = await asyncio.shield(self._admit(task, uploaded_by))
        self._emit(task, TaskEventType.COMPLETED)
        if self._on_completed is not None:
            self._on_completed(task.model_copy(deep=True), document)

        if self.completed_ttl is not None:
            await self.clock.sleep(self.completed_ttl)
            if not self._is_removed(task):
                self.remove(task.id)

    async def _admit(self, task: UploadTask, uploaded_by: str) -> Document:
        file = task.file
        document = await self.store.create(NewDocument(
            name=file.name,
            doc_type="upload",
            category=get_file_category(file),
            file_type=get_file_type(file),
            size=format_file_size(file.size),
            upload_date=self.clock.today(),
            status=UPLOADED_STATUS,
            tags=UPLOADED_TAGS,
            uploaded_by=uploaded_by,
        ))
        task.document_id = document.id
        logger.log_step("upload_task_completed", {
            "task_id": task.id,
            "document_id": document.id,
            "filename": file.name
        })
        return document
