# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Job State Models
Tracks a batch generation request from submission through completion,
cancellation or failure. Used by the JobStore and the status endpoints.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class JobKind(str, Enum):
    CARDS = "cards"
    REWEIGHTS = "reweights"


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({JobStatus.DONE, JobStatus.FAILED, JobStatus.CANCELLED})


class JobStage(str, Enum):
    """Batch stage labels for progress display."""
    QUEUED = "queued"
    GENERATING = "generating"
    PACKAGING = "packaging"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


ARCHIVE_NAMES: dict[JobKind, str] = {
    JobKind.CARDS: "map_cards.zip",
    JobKind.REWEIGHTS: "selected_reweight_cards.zip",
}


class BatchResult(BaseModel):
    """Published only when a batch runs to completion."""
    archive_url: str
    succeeded: int = 0
    skipped: int = 0
    total: int = 0


class Job(BaseModel):
    """Full job state record stored in JobStore."""
    job_id: str
    kind: JobKind = JobKind.CARDS
    status: JobStatus = JobStatus.PENDING
    stage: JobStage = JobStage.QUEUED
    progress: int = Field(0, ge=0, le=100)
    processed: int = 0
    total: int = 0
    cancel_requested: bool = False
    error: Optional[str] = None
    result: Optional[BatchResult] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_status_response(self) -> dict:
        """Serialise to the shape returned by GET /status/{job_id}."""
        resp = {
            "job_id": self.job_id,
            "kind": self.kind.value,
            "status": self.status.value,
            "stage": self.stage.value,
            "progress": self.progress,
            "processed": self.processed,
            "total": self.total,
            "error": self.error,
        }
        if self.result:
            resp["result"] = self.result.model_dump()
        return resp


# ─── API Response Schemas ────────────────────────────────────────────────────

class BatchResponse(BaseModel):
    """Response body for POST /batch."""
    job_id: str
    status: JobStatus = JobStatus.PENDING
    message: str = "Batch job created. Poll /status/{job_id} for progress."


class CancelResponse(BaseModel):
    """Response body for POST /batch/{job_id}/cancel."""
    job_id: str
    status: JobStatus
    cancel_requested: bool
