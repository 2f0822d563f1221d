# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Abstract JobStore
Clean interface over batch job state storage.

InMemoryJobStore  — development / single-worker deployments
RedisJobStore     — multi-worker deployments; the cancel flag travels
                    with the job record so any worker can request it
"""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from artgen.models.job import BatchResult, Job, JobKind, JobStage, JobStatus
from artgen.utils.logger import get_logger

log = get_logger(__name__)


def _apply(
    job: Job,
    *,
    status: Optional[JobStatus],
    stage: Optional[JobStage],
    progress: Optional[int],
    processed: Optional[int],
    total: Optional[int],
    cancel_requested: Optional[bool],
    error: Optional[str],
    result: Optional[BatchResult],
) -> Job:
    if status is not None:
        job.status = status
    if stage is not None:
        job.stage = stage
    if progress is not None:
        job.progress = progress
    if processed is not None:
        job.processed = processed
    if total is not None:
        job.total = total
    if cancel_requested is not None:
        job.cancel_requested = cancel_requested
    if error is not None:
        job.error = error
    if result is not None:
        job.result = result
    job.updated_at = datetime.now(timezone.utc)
    return job


# ─── Abstract Interface ──────────────────────────────────────────────────────

class JobStore(ABC):
    """
    Abstract base class for all job state backends.
    All methods are synchronous; the batch driver calls them between items.
    """

    @abstractmethod
    def create_job(self, kind: JobKind = JobKind.CARDS, total: int = 0) -> Job:
        """Create a new job with PENDING status. Returns the Job."""

    @abstractmethod
    def get_job(self, job_id: str) -> Optional[Job]:
        """Return Job by ID, or None if not found."""

    @abstractmethod
    def update_job(
        self,
        job_id: str,
        *,
        status: Optional[JobStatus] = None,
        stage: Optional[JobStage] = None,
        progress: Optional[int] = None,
        processed: Optional[int] = None,
        total: Optional[int] = None,
        cancel_requested: Optional[bool] = None,
        error: Optional[str] = None,
        result: Optional[BatchResult] = None,
    ) -> None:
        """Partially update a job record. Only provided fields are changed."""

    def report_progress(self, job_id: str, processed: int, total: int) -> int:
        """Record processed/total and derive floor(processed / total * 100)."""
        progress = (processed * 100) // total if total > 0 else 100
        self.update_job(job_id, processed=processed, total=total, progress=progress)
        return progress

    def request_cancel(self, job_id: str) -> bool:
        """
        Flag a pending/running job for cancellation.
        Returns False when the job is unknown or already finished.
        """
        job = self.get_job(job_id)
        if job is None or job.is_terminal:
            return False
        self.update_job(job_id, cancel_requested=True)
        log.info("job_cancel_requested", job_id=job_id)
        return True

    def is_cancel_requested(self, job_id: str) -> bool:
        job = self.get_job(job_id)
        return bool(job and job.cancel_requested)

    def complete_job(self, job_id: str, result: BatchResult) -> None:
        self.update_job(
            job_id,
            status=JobStatus.DONE,
            stage=JobStage.DONE,
            progress=100,
            result=result,
        )

    def cancel_job(self, job_id: str) -> None:
        """Mark a job cancelled. No result is published."""
        self.update_job(job_id, status=JobStatus.CANCELLED, stage=JobStage.CANCELLED)
        log.info("job_cancelled", job_id=job_id)

    def fail_job(self, job_id: str, error: str) -> None:
        """Mark a job as failed with an error message."""
        self.update_job(
            job_id,
            status=JobStatus.FAILED,
            stage=JobStage.FAILED,
            error=error,
        )
        log.error("job_failed", job_id=job_id, error=error)


# ─── In-Memory Implementation ────────────────────────────────────────────────

class InMemoryJobStore(JobStore):
    """
    Thread-safe in-memory job store using a dict + RLock.
    All data is lost on process restart.
    """

    def __init__(self) -> None:
        self._store: dict[str, Job] = {}
        self._lock = threading.RLock()

    def create_job(self, kind: JobKind = JobKind.CARDS, total: int = 0) -> Job:
        job = Job(job_id=str(uuid.uuid4()), kind=kind, total=total)
        with self._lock:
            self._store[job.job_id] = job
        log.info("job_created", job_id=job.job_id, kind=kind.value, backend="memory")
        return job.model_copy()

    def get_job(self, job_id: str) -> Optional[Job]:
        with self._lock:
            job = self._store.get(job_id)
            return job.model_copy() if job is not None else None

    def update_job(
        self,
        job_id: str,
        *,
        status: Optional[JobStatus] = None,
        stage: Optional[JobStage] = None,
        progress: Optional[int] = None,
        processed: Optional[int] = None,
        total: Optional[int] = None,
        cancel_requested: Optional[bool] = None,
        error: Optional[str] = None,
        result: Optional[BatchResult] = None,
    ) -> None:
        with self._lock:
            job = self._store.get(job_id)
            if job is None:
                log.warning("update_job_not_found", job_id=job_id)
                return
            _apply(
                job,
                status=status, stage=stage, progress=progress,
                processed=processed, total=total, cancel_requested=cancel_requested,
                error=error, result=result,
            )

        log.debug(
            "job_updated",
            job_id=job_id,
            status=status.value if status else None,
            progress=progress,
        )

    def count(self) -> int:
        """Return total number of jobs in store (useful for health checks)."""
        with self._lock:
            return len(self._store)


# ─── Redis Implementation ────────────────────────────────────────────────────

class RedisJobStore(JobStore):
    """
    Redis-backed job store. Jobs are JSON-serialised with TTL expiry.
    Requires redis-py and a running Redis instance.
    """

    def __init__(self, redis_url: str, ttl_seconds: int = 86400) -> None:
        try:
            import redis as redis_lib
        except ImportError as e:
            raise ImportError(
                "redis package required for RedisJobStore. "
                "Install with: pip install redis"
            ) from e

        self._client = redis_lib.from_url(redis_url, decode_responses=True)
        self._ttl = ttl_seconds
        self._prefix = "artgen:job:"

        self._client.ping()
        log.info("redis_job_store_connected", url=redis_url)

    def _key(self, job_id: str) -> str:
        return f"{self._prefix}{job_id}"

    def _save(self, job: Job) -> None:
        # TTL refreshed on every write
        self._client.setex(self._key(job.job_id), self._ttl, job.model_dump_json())

    def create_job(self, kind: JobKind = JobKind.CARDS, total: int = 0) -> Job:
        job = Job(job_id=str(uuid.uuid4()), kind=kind, total=total)
        self._save(job)
        log.info("job_created", job_id=job.job_id, kind=kind.value, backend="redis")
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        raw = self._client.get(self._key(job_id))
        if raw is None:
            return None
        return Job.model_validate_json(raw)

    def update_job(
        self,
        job_id: str,
        *,
        status: Optional[JobStatus] = None,
        stage: Optional[JobStage] = None,
        progress: Optional[int] = None,
        processed: Optional[int] = None,
        total: Optional[int] = None,
        cancel_requested: Optional[bool] = None,
        error: Optional[str] = None,
        result: Optional[BatchResult] = None,
    ) -> None:
        job = self.get_job(job_id)
        if job is None:
            log.warning("update_job_not_found", job_id=job_id)
            return

        self._save(
            _apply(
                job,
                status=status, stage=stage, progress=progress,
                processed=processed, total=total, cancel_requested=cancel_requested,
                error=error, result=result,
            )
        )

        log.debug(
            "job_updated",
            job_id=job_id,
            status=status.value if status else None,
            progress=progress,
        )
