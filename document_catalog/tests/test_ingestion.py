import random
import unittest
from datetime import date

from document_catalog.errors import InvalidTaskStateError, TaskNotFoundError
from document_catalog.models.upload import FileRef, TaskEventType, UploadStatus
from document_catalog.services.catalog_store import CatalogStore
from document_catalog.services.ingestion_service import (
    UPLOAD_FAILED_MESSAGE,
    IngestionPipeline,
    TransferPlan,
    TransferPlanner,
)
from document_catalog.utils.clock import VirtualClock

MIB = 1024 * 1024


class ScriptedPlanner(TransferPlanner):
    """Planner whose failure outcomes follow a fixed script."""

    def __init__(self, failures, duration: float = 2.0):
        super().__init__(max_increment=30, failure_rate=0.0, rng=random.Random(3))
        self.failures = list(failures)
        self.duration = duration

    def plan(self) -> TransferPlan:
        fails = self.failures.pop(0) if self.failures else False
        return TransferPlan(duration=self.duration, fails=fails)


def lease_file() -> FileRef:
    return FileRef(name="lease.pdf", size=MIB, mime_type="application/pdf")


class TestIngestionPipeline(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.store = CatalogStore()
        self.clock = VirtualClock(start=date(2024, 5, 1))
        self.events = []

    def make_pipeline(self, planner=None, completed_ttl=None) -> IngestionPipeline:
        pipeline = IngestionPipeline(
            self.store,
            clock=self.clock,
            planner=planner or TransferPlanner(failure_rate=0.0, rng=random.Random(11)),
            completed_ttl=completed_ttl,
        )
        pipeline.subscribe(lambda task_id, event: self.events.append((task_id, event)))
        return pipeline

    async def test_successful_upload_admits_document(self):
        pipeline = self.make_pipeline()

        task_id = pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        task = pipeline.get(task_id)
        self.assertEqual(task.status, UploadStatus.COMPLETED)
        self.assertEqual(task.progress, 100)

        documents = self.store.list()
        self.assertEqual(len(documents), 1)
        document = documents[0]
        self.assertEqual(task.document_id, document.id)
        self.assertEqual(document.name, "lease.pdf")
        self.assertEqual(document.category, "Legal")
        self.assertEqual(document.status, "uploaded")
        self.assertEqual(document.tags, ("uploaded", "new"))
        self.assertEqual(document.size, "1 MB")
        self.assertEqual(document.property, "All Properties")
        self.assertEqual(document.tenant, "N/A")
        self.assertEqual(document.uploaded_by, "Alice")
        self.assertEqual(document.upload_date, date(2024, 5, 1))

    async def test_progress_is_monotonic_and_capped_before_completion(self):
        pipeline = self.make_pipeline(planner=ScriptedPlanner([False], duration=4.0))

        task_id = pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        progress_events = [event for tid, event in self.events if tid == task_id and event.type is TaskEventType.PROGRESS]
        values = [event.progress for event in progress_events]
        self.assertTrue(values)
        self.assertEqual(values, sorted(values))
        self.assertTrue(all(value <= 95 for value in values))

        last_task_id, last_event = self.events[-1]
        self.assertEqual(last_task_id, task_id)
        self.assertEqual(last_event.type, TaskEventType.COMPLETED)
        self.assertEqual(last_event.progress, 100)

    async def test_simulated_time_matches_planned_duration(self):
        pipeline = self.make_pipeline(planner=ScriptedPlanner([False], duration=2.5))

        pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        self.assertAlmostEqual(self.clock.elapsed, 2.5)

    async def test_failed_upload_exposes_error_and_creates_nothing(self):
        pipeline = self.make_pipeline(planner=ScriptedPlanner([True]))

        task_id = pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        task = pipeline.get(task_id)
        self.assertEqual(task.status, UploadStatus.ERROR)
        self.assertEqual(task.error, UPLOAD_FAILED_MESSAGE)
        self.assertLess(task.progress, 100)
        self.assertEqual(len(self.store), 0)
        self.assertEqual(self.events[-1][1].type, TaskEventType.ERROR)

    async def test_retry_restarts_from_zero_and_can_complete(self):
        pipeline = self.make_pipeline(planner=ScriptedPlanner([True, True, False]))
        task_id = pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        for attempt in (2, 3):
            retried = pipeline.retry(task_id)
            self.assertEqual(retried.progress, 0)
            self.assertEqual(retried.status, UploadStatus.UPLOADING)
            self.assertIsNone(retried.error)
            self.assertEqual(retried.attempts, attempt)
            await pipeline.join()

        task = pipeline.get(task_id)
        self.assertEqual(task.status, UploadStatus.COMPLETED)
        self.assertEqual(len(pipeline.tasks()), 1)
        self.assertEqual(len(self.store), 1)

    async def test_retries_eventually_succeed_with_random_failures(self):
        planner = TransferPlanner(failure_rate=0.5, rng=random.Random(2024))
        pipeline = self.make_pipeline(planner=planner)
        task_id = pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        for _ in range(50):
            if pipeline.get(task_id).status is UploadStatus.COMPLETED:
                break
            pipeline.retry(task_id)
            await pipeline.join()

        self.assertEqual(pipeline.get(task_id).status, UploadStatus.COMPLETED)

    async def test_retry_requires_error_state(self):
        pipeline = self.make_pipeline()
        task_id = pipeline.start(lease_file(), "Alice")

        with self.assertRaises(InvalidTaskStateError):
            pipeline.retry(task_id)
        with self.assertRaises(TaskNotFoundError):
            pipeline.retry("missing")

        await pipeline.join()

    async def test_removing_running_task_stops_it(self):
        pipeline = self.make_pipeline()

        task_id = pipeline.start(lease_file(), "Alice")
        pipeline.remove(task_id)
        await pipeline.join()

        self.assertEqual(pipeline.tasks(), [])
        self.assertEqual(len(self.store), 0)
        self.assertEqual([event.type for _, event in self.events], [TaskEventType.REMOVED])
        with self.assertRaises(TaskNotFoundError):
            pipeline.get(task_id)

    async def test_listener_removing_task_stops_transfer(self):
        pipeline = self.make_pipeline(planner=ScriptedPlanner([False], duration=4.0))

        def remove_on_first_progress(task_id, event):
            if event.type is TaskEventType.PROGRESS:
                pipeline.remove(task_id)

        pipeline.subscribe(remove_on_first_progress)
        task_id = pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        task_events = [event.type for tid, event in self.events if tid == task_id]
        self.assertEqual(task_events, [TaskEventType.PROGRESS, TaskEventType.REMOVED])
        self.assertEqual(pipeline.tasks(), [])
        self.assertEqual(len(self.store), 0)

    async def test_removal_keeps_admitted_document(self):
        pipeline = self.make_pipeline()
        task_id = pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        pipeline.remove(task_id)

        self.assertEqual(pipeline.tasks(), [])
        self.assertEqual(len(self.store), 1)

    async def test_completed_tasks_are_removed_after_display_window(self):
        pipeline = self.make_pipeline(completed_ttl=3.0)

        pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        self.assertEqual(pipeline.tasks(), [])
        self.assertEqual(len(self.store), 1)
        self.assertEqual(self.events[-1][1].type, TaskEventType.REMOVED)

    async def test_concurrent_uploads_create_distinct_documents(self):
        pipeline = self.make_pipeline()
        files = [FileRef(name=f"bill-{index}.txt", size=2048, mime_type="text/plain") for index in range(8)]

        task_ids = [pipeline.start(file, "Alice") for file in files]
        await pipeline.join()

        self.assertEqual(len(set(task_ids)), 8)
        documents = self.store.list()
        self.assertEqual(len(documents), 8)
        self.assertEqual(len({document.id for document in documents}), 8)
        self.assertTrue(all(document.category == "Utilities" for document in documents))

    async def test_failing_listener_does_not_break_pipeline(self):
        pipeline = self.make_pipeline()

        def broken(task_id, event):
            raise RuntimeError("listener exploded")

        pipeline.subscribe(broken)
        task_id = pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        self.assertEqual(pipeline.get(task_id).status, UploadStatus.COMPLETED)

    async def test_unsubscribe_stops_events(self):
        pipeline = IngestionPipeline(self.store, clock=self.clock, completed_ttl=None,
                                     planner=TransferPlanner(failure_rate=0.0))
        received = []
        unsubscribe = pipeline.subscribe(lambda task_id, event: received.append(event))
        unsubscribe()

        pipeline.start(lease_file(), "Alice")
        await pipeline.join()

        self.assertEqual(received, [])

    async def test_shutdown_cancels_running_tasks(self):
        pipeline = self.make_pipeline()
        pipeline.start(lease_file(), "Alice")

        await pipeline.shutdown()
        await pipeline.join()

        self.assertEqual(len(self.store), 0)


class TestTransferPlanner(unittest.TestCase):

    def test_plan_within_bounds(self):
        planner = TransferPlanner(min_duration=1.0, max_duration=4.0, rng=random.Random(5))
        for _ in range(100):
            plan = planner.plan()
            self.assertGreaterEqual(plan.duration, 1.0)
            self.assertLessEqual(plan.duration, 4.0)

    def test_failure_rate_extremes(self):
        self.assertTrue(all(TransferPlanner(failure_rate=1.0).plan().fails for _ in range(20)))
        self.assertFalse(any(TransferPlanner(failure_rate=0.0).plan().fails for _ in range(20)))

    def test_invalid_configuration(self):
        with self.assertRaises(ValueError):
            TransferPlanner(min_duration=3.0, max_duration=1.0)
        with self.assertRaises(ValueError):
            TransferPlanner(failure_rate=1.5)


if __name__ == '__main__':
    unittest.main()
