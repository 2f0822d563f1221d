# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Batch Driver
Turns an export of qualified maps or reweights into a zip of cards.
Runs as a FastAPI background task, one generation at a time.

  cards      records grouped by song hash → one map card per song
  reweights  one reweight card per record, on the record's difficulty

Before each item the job's cancel flag is checked; a cancelled batch
discards its partial archive and publishes no result. After every item,
success or not, progress = floor(processed / total * 100). Item failures
are logged with the song hash and counted as skipped.
"""

from __future__ import annotations

import asyncio
import io
import re
import traceback
import zipfile
from dataclasses import dataclass
from typing import Iterable, Union

import structlog

from artgen.core.job_store import JobStore
from artgen.core.map_provider import MapDataProvider
from artgen.models.job import ARCHIVE_NAMES, BatchResult, JobKind, JobStage, JobStatus
from artgen.models.map_info import DIFFICULTY_NUMBERS, MapInfo, StarRatings
from artgen.models.requests import BatchRecord
from artgen.modules.generators.card import generate_card
from artgen.modules.generators.reweight_card import generate_reweight_card
from artgen.utils.image_utils import data_uri_to_bytes
from artgen.utils.logger import get_logger
from artgen.utils.storage import archive_path, get_asset_url, init_job_dirs

log = get_logger(__name__)

_UNSAFE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def sanitize_name(name: str) -> str:
    """Non-alphanumerics → '_', lower-cased."""
    return _UNSAFE.sub("_", name).lower()


# ─── Work Items ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CardItem:
    song_hash: str
    star_ratings: StarRatings

    def render(self, map_info: MapInfo, use_background: bool) -> str:
        return generate_card(map_info, self.star_ratings, use_background)

    def filename(self, map_info: MapInfo) -> str:
        return f"{sanitize_name(map_info.metadata.song_name)}-{map_info.id}.png"


@dataclass(frozen=True)
class ReweightItem:
    song_hash: str
    song_name: str
    difficulty: str
    old_star_ratings: StarRatings
    new_star_ratings: StarRatings

    def render(self, map_info: MapInfo, use_background: bool) -> str:
        return generate_reweight_card(
            map_info, self.old_star_ratings, self.new_star_ratings, self.difficulty
        )

    def filename(self, map_info: MapInfo) -> str:
        return f"{sanitize_name(self.song_name)}-{self.difficulty}-{map_info.id}.png"


BatchItem = Union[CardItem, ReweightItem]


def plan_card_items(records: Iterable[BatchRecord]) -> list[CardItem]:
    """Group by song hash in first-seen order, merging ratings per difficulty."""
    grouped: dict[str, StarRatings] = {}
    for record in records:
        ratings = grouped.get(record.song_hash, StarRatings())
        key = DIFFICULTY_NUMBERS.get(record.difficulty)
        if key is None:
            log.debug("unknown_difficulty_ignored", difficulty=record.difficulty)
        else:
            ratings = ratings.with_rating(key, record.stars)
        grouped[record.song_hash] = ratings
    return [CardItem(song_hash=h, star_ratings=r) for h, r in grouped.items()]


def plan_reweight_items(records: Iterable[BatchRecord]) -> list[ReweightItem]:
    """One item per record; unknown difficulty numbers fall back to ES."""
    items = []
    for record in records:
        key = DIFFICULTY_NUMBERS.get(record.difficulty, "ES")
        items.append(
            ReweightItem(
                song_hash=record.song_hash,
                song_name=record.song_name,
                difficulty=key,
                old_star_ratings=StarRatings().with_rating(key, record.old_stars),
                new_star_ratings=StarRatings().with_rating(key, record.new_stars),
            )
        )
    return items


def plan_items(kind: JobKind, records: Iterable[BatchRecord]) -> list[BatchItem]:
    if kind == JobKind.REWEIGHTS:
        return plan_reweight_items(records)
    return plan_card_items(records)


def _generate(
    item: BatchItem, provider: MapDataProvider, use_background: bool
) -> tuple[str, bytes]:
    map_info = provider.fetch(item.song_hash)
    uri = item.render(map_info, use_background)
    return item.filename(map_info), data_uri_to_bytes(uri)


# ─── Driver ──────────────────────────────────────────────────────────────────

async def run_batch(
    job_id: str,
    kind: JobKind,
    records: list[BatchRecord],
    store: JobStore,
    provider: MapDataProvider,
    use_background: bool = False,
) -> None:
    """
    Batch coroutine. Runs as a FastAPI background task.
    Anything escaping the per-item handling marks the job FAILED.
    """
    structlog.contextvars.bind_contextvars(job_id=job_id)

    try:
        await _run(job_id, kind, records, store, provider, use_background)
    except Exception as exc:
        err_msg = f"{type(exc).__name__}: {exc}"
        log.error(
            "batch_fatal_error",
            job_id=job_id,
            error=err_msg,
            traceback=traceback.format_exc(),
        )
        store.fail_job(job_id, err_msg)
    finally:
        structlog.contextvars.clear_contextvars()


async def _run(
    job_id: str,
    kind: JobKind,
    records: list[BatchRecord],
    store: JobStore,
    provider: MapDataProvider,
    use_background: bool,
) -> None:
    items = plan_items(kind, records)
    total = len(items)
    store.update_job(
        job_id,
        status=JobStatus.RUNNING,
        stage=JobStage.GENERATING,
        processed=0,
        total=total,
        progress=0,
    )
    log.info("batch_start", kind=kind.value, records=len(records), items=total)

    succeeded = skipped = 0
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for index, item in enumerate(items):
            if store.is_cancel_requested(job_id):
                store.cancel_job(job_id)
                log.warning("batch_cancelled", processed=index, total=total)
                return
            try:
                name, png = await asyncio.to_thread(_generate, item, provider, use_background)
                archive.writestr(name, png)
                succeeded += 1
            except Exception as exc:
                skipped += 1
                log.warning(
                    "batch_item_failed",
                    song_hash=item.song_hash,
                    error=f"{type(exc).__name__}: {exc}",
                )
            finally:
                store.report_progress(job_id, index + 1, total)

    store.update_job(job_id, stage=JobStage.PACKAGING)
    archive_name = ARCHIVE_NAMES[kind]
    init_job_dirs(job_id)
    archive_path(job_id, archive_name).write_bytes(buffer.getvalue())

    store.complete_job(
        job_id,
        BatchResult(
            archive_url=get_asset_url(job_id, archive_name),
            succeeded=succeeded,
            skipped=skipped,
            total=total,
        ),
    )
    log.info("batch_complete", succeeded=succeeded, skipped=skipped, total=total)
