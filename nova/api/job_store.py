from __future__ import annotations

import threading
from datetime import datetime, timedelta

from nova.models.entities import VideoJob
from nova.models.enums import JobStatus
from nova.models.errors import JobNotFound

DEFAULT_JOB_TTL = timedelta(hours=1)


class InMemoryJobStore:
    """Standalone video jobs; finished ones are evicted ``ttl`` after they end."""

    def __init__(self, ttl: timedelta = DEFAULT_JOB_TTL) -> None:
        self._ttl = ttl
        self._jobs: dict[str, VideoJob] = {}
        self._lock = threading.Lock()

    def create(self, prompt: str, aspect_ratio: str) -> VideoJob:
        self.cleanup_expired()
        job = VideoJob(prompt=prompt, aspect_ratio=aspect_ratio)
        with self._lock:
            self._jobs[job.id] = job
        return job.model_copy()

    def get(self, job_id: str) -> VideoJob | None:
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy() if job else None

    def update(self, job_id: str, state: VideoJob) -> VideoJob:
        """Copy the poller's view of a job onto the tracked record, keeping its id."""

        with self._lock:
            if job_id not in self._jobs:
                raise JobNotFound(job_id)
            changes: dict[str, object] = {"id": job_id}
            if state.status != JobStatus.pending and state.finished_at is None:
                changes["finished_at"] = datetime.utcnow()
            updated = state.model_copy(update=changes)
            self._jobs[job_id] = updated
            return updated.model_copy()

    def fail(self, job_id: str, error: str) -> VideoJob:
        with self._lock:
            if job_id not in self._jobs:
                raise JobNotFound(job_id)
            job = self._jobs[job_id]
            job.status = JobStatus.failed
            job.error = error
            job.finished_at = job.finished_at or datetime.utcnow()
            return job.model_copy()

    def cleanup_expired(self, now: datetime | None = None) -> int:
        now_ = now or datetime.utcnow()
        with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if job.finished_at is not None and job.finished_at + self._ttl <= now_
            ]
            for job_id in expired:
                del self._jobs[job_id]
        return len(expired)
