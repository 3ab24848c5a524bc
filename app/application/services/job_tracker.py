"""In-memory progress registry for ingestion runs.

One ``JobTracker`` is created per process and handed to whoever needs it
(held on ``app.state``). State is never persisted; a restart forgets every
job. Each entry is written only by its own run, one counter step at a time,
and readers get a copy so polling never observes a half-applied update.
"""

from typing import Optional

from app.domain.schemas.job import CommitOutcome, JobState, JobStatus

_COUNTERS = {
    CommitOutcome.INSERTED: "successful_inserts",
    CommitOutcome.DUPLICATE: "skipped_duplicates",
    CommitOutcome.FAILED: "failed_inserts",
}


class JobTracker:
    def __init__(self) -> None:
        self._jobs: dict[str, JobState] = {}

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)

    def start(self, job_id: str) -> JobState:
        """Register a run as PENDING with zeroed counters."""
        state = JobState()
        self._jobs[job_id] = state
        return state.model_copy(deep=True)

    def get(self, job_id: str) -> Optional[JobState]:
        """Snapshot of a job's state, or None if the id is unknown."""
        state = self._jobs.get(job_id)
        return state.model_copy(deep=True) if state is not None else None

    def set_total(self, job_id: str, total: int) -> None:
        self._jobs[job_id].summary.total_processed = total

    def record(self, job_id: str, outcome: CommitOutcome) -> None:
        """Count one processed order under its outcome."""
        summary = self._jobs[job_id].summary
        counter = _COUNTERS[outcome]
        setattr(summary, counter, getattr(summary, counter) + 1)

    def complete(self, job_id: str) -> JobState:
        state = self._jobs[job_id]
        state.status = JobStatus.COMPLETED
        return state.model_copy(deep=True)

    def fail(self, job_id: str, error: str) -> JobState:
        state = self._jobs[job_id]
        state.status = JobStatus.FAILED
        state.error = error
        return state.model_copy(deep=True)

    def reset(self) -> None:
        """Forget every job."""
        self._jobs.clear()
