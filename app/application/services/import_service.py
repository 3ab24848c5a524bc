"""Order import service — runs an uploaded export through the pipeline.

``start_ingestion`` registers a job and schedules the run on the running
event loop, returning the job id straight away. The run reads and groups the
file, then commits the aggregates strictly one after another, counting each
outcome on the job. The uploaded file is removed when the run ends, whether
it succeeded or not.
"""

import asyncio
import os
import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.services.job_tracker import JobTracker
from app.application.services.order_committer import OrderCommitter
from app.application.services.order_grouper import group_order_rows, read_order_rows
from app.core.exceptions import JobNotFoundException, RunFailureError
from app.domain.schemas.job import JobState

logger = structlog.get_logger(__name__)


def _remove_source_file(file_path: str) -> None:
    try:
        os.remove(file_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error("Error deleting uploaded file", file_path=file_path, error=str(e))


class IngestionService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], job_tracker: JobTracker):
        self.job_tracker = job_tracker
        self.committer = OrderCommitter(session_factory)
        self._tasks: set[asyncio.Task] = set()

    def start_ingestion(self, file_path: str) -> str:
        """Begin a run in the background and return its job id."""
        job_id = uuid.uuid4().hex
        self.job_tracker.start(job_id)

        task = asyncio.create_task(self._run_detached(job_id, file_path), name=f"ingestion-{job_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info("Import started", job_id=job_id, file_path=file_path)
        return job_id

    def get_job_state(self, job_id: str) -> JobState:
        state = self.job_tracker.get(job_id)
        if state is None:
            raise JobNotFoundException(job_id)
        return state

    async def wait_for_all(self) -> None:
        """Wait for every scheduled run to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def _run_detached(self, job_id: str, file_path: str) -> None:
        try:
            await self.run(job_id, file_path)
        except RunFailureError:
            # Already recorded on the job and logged by run()
            pass

    async def run(self, job_id: str, file_path: str) -> JobState:
        """
        Ingest one file under ``job_id``.

        Raises RunFailureError (after marking the job FAILED) when the file
        cannot be read or grouped. Per-order failures never abort the run.
        """
        if job_id not in self.job_tracker:
            self.job_tracker.start(job_id)

        with structlog.contextvars.bound_contextvars(job_id=job_id):
            try:
                try:
                    rows = await asyncio.to_thread(read_order_rows, file_path)
                    aggregates = group_order_rows(rows)
                except Exception as e:
                    logger.exception("Import failed before processing orders", file_path=file_path)
                    self.job_tracker.fail(job_id, str(e))
                    raise RunFailureError(job_id, str(e)) from e

                self.job_tracker.set_total(job_id, len(aggregates))
                logger.info("Order export grouped", rows=len(rows), orders=len(aggregates))

                for aggregate in aggregates:
                    outcome = await self.committer.commit(aggregate)
                    self.job_tracker.record(job_id, outcome)

                state = self.job_tracker.complete(job_id)
                logger.info("Import completed", **state.summary.model_dump())
                return state
            finally:
                _remove_source_file(file_path)
