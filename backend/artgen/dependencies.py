# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — FastAPI Dependencies
The JobStore singleton is created once during the lifespan startup in
main.py and injected into route handlers via Depends().
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from artgen.config import get_settings
from artgen.core.job_store import InMemoryJobStore, JobStore, RedisJobStore
from artgen.utils.logger import get_logger

log = get_logger(__name__)

# ─── JobStore Singleton ───────────────────────────────────────────────────────

_job_store: JobStore | None = None


def init_job_store() -> None:
    """
    Initialise the JobStore singleton based on JOB_STORE_BACKEND config.
    Called once during application lifespan startup.
    """
    global _job_store
    settings = get_settings()

    if settings.job_store_backend == "redis":
        log.info("init_job_store", backend="redis", url=settings.redis_url)
        _job_store = RedisJobStore(
            redis_url=settings.redis_url,
            ttl_seconds=settings.job_ttl_seconds,
        )
    else:
        log.info("init_job_store", backend="memory")
        _job_store = InMemoryJobStore()


def get_job_store() -> JobStore:
    """FastAPI dependency: the JobStore singleton."""
    if _job_store is None:
        raise RuntimeError(
            "JobStore has not been initialised. "
            "Ensure init_job_store() is called during app lifespan startup."
        )
    return _job_store


JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
