# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — POST /batch + POST /batch/{job_id}/cancel
Creates a batch job over an export of qualified maps or reweights and
enqueues the batch driver as a FastAPI background task.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, status

from artgen.api.middleware.error_handler import JobNotFoundError
from artgen.core.batch_driver import run_batch
from artgen.core.map_provider import InMemoryMapProvider
from artgen.dependencies import JobStoreDep
from artgen.models.job import BatchResponse, CancelResponse
from artgen.models.requests import BatchRequest
from artgen.utils.logger import get_logger
from artgen.utils.storage import init_job_dirs

router = APIRouter(tags=["batch"])
log = get_logger(__name__)


@router.post(
    "/batch",
    response_model=BatchResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit a batch card job",
    description=(
        "`kind` is 'cards' (records grouped by songHash, one card per song) or "
        "'reweights' (one reweight card per record). `maps` supplies the map "
        "documents that song hashes resolve against. Poll GET /status/{job_id}."
    ),
)
async def submit_batch(
    req: BatchRequest,
    background_tasks: BackgroundTasks,
    store: JobStoreDep,
) -> BatchResponse:
    job = store.create_job(kind=req.kind)
    init_job_dirs(job.job_id)

    log.info(
        "batch_request_received",
        job_id=job.job_id,
        kind=req.kind.value,
        records=len(req.records),
        maps=len(req.maps),
    )

    background_tasks.add_task(
        run_batch,
        job.job_id,
        req.kind,
        req.records,
        store,
        InMemoryMapProvider(req.maps),
        req.use_background,
    )
    return BatchResponse(job_id=job.job_id)


@router.post(
    "/batch/{job_id}/cancel",
    response_model=CancelResponse,
    summary="Request cancellation of a batch job",
    description=(
        "Cooperative: the driver stops before its next item and discards the "
        "partial archive. Finished jobs are returned unchanged."
    ),
)
async def cancel_batch(job_id: str, store: JobStoreDep) -> CancelResponse:
    job = store.get_job(job_id)
    if job is None:
        raise JobNotFoundError(job_id)

    accepted = store.request_cancel(job_id)
    job = store.get_job(job_id)
    return CancelResponse(
        job_id=job_id,
        status=job.status,
        cancel_requested=accepted or job.cancel_requested,
    )
