# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Per-Job Namespaced Storage
Batch archives are written under storage/{job_id}/outputs/ so that
simultaneous jobs never collide.

Layout per job:
    storage/{job_id}/
        outputs/
            map_cards.zip | selected_reweight_cards.zip
"""

import shutil
from pathlib import Path

from artgen.config import get_settings


def _root() -> Path:
    return get_settings().storage_root


def job_dir(job_id: str) -> Path:
    return _root() / job_id


def outputs_dir(job_id: str) -> Path:
    return job_dir(job_id) / "outputs"


def archive_path(job_id: str, filename: str) -> Path:
    return outputs_dir(job_id) / filename


def init_job_dirs(job_id: str) -> None:
    """Create the job's output directory. Safe to call repeatedly."""
    outputs_dir(job_id).mkdir(parents=True, exist_ok=True)


def cleanup_job(job_id: str) -> None:
    """Remove everything written for a job; no-op if nothing exists."""
    d = job_dir(job_id)
    if d.exists():
        shutil.rmtree(d)


def get_asset_url(job_id: str, filename: str) -> str:
    """Build the public URL for a job output asset."""
    return f"/assets/{job_id}/{filename}"
