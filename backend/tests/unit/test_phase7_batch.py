# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 7 — Batch driver and HTTP surface tests.
Planning of qualified / reweight exports, progress reporting, per-item
skips, cancellation, archive packaging, and the /generate, /batch,
/status and /assets endpoints end to end.
"""

import asyncio
import base64
import io
import zipfile

import cv2
import numpy as np
import pytest


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _data_uri(rgb=(90, 60, 200), w=32, h=32) -> str:
    img = np.zeros((h, w, 3), dtype=np.uint8)
    img[:] = rgb[::-1]
    ok, buf = cv2.imencode(".png", img)
    assert ok
    return "data:image/png;base64," + base64.b64encode(buf.tobytes()).decode()


def _map_doc(map_id: str, song_hash: str, name: str = "Song") -> dict:
    return {
        "id": map_id,
        "metadata": {
            "songName": name,
            "songAuthorName": "Artist",
            "levelAuthorName": "Mapper",
            "duration": 120,
            "bpm": 150,
        },
        "versions": [{"coverURL": _data_uri(), "hash": song_hash}],
    }


def _map(map_id: str, song_hash: str, name: str = "Song"):
    from artgen.models.map_info import MapInfo
    return MapInfo.model_validate(_map_doc(map_id, song_hash, name))


def _record(song_hash: str, difficulty: int, **kw):
    from artgen.models.requests import BatchRecord
    return BatchRecord.model_validate({"songHash": song_hash, "difficulty": difficulty, **kw})


@pytest.fixture
def tmp_storage(tmp_path, monkeypatch):
    from artgen.config import get_settings

    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path))
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def _run(coro):
    return asyncio.run(coro)


# ─── Planning ────────────────────────────────────────────────────────────────

def test_sanitize_name():
    from artgen.core.batch_driver import sanitize_name
    assert sanitize_name("Night Drive (Extended)!") == "night_drive__extended__"
    assert sanitize_name("ÄBC-123") == "_bc_123"


def test_plan_card_items_groups_by_hash_in_first_seen_order():
    from artgen.core.batch_driver import plan_card_items

    records = [
        _record("bbb", 5, stars=7.0),
        _record("aaa", 1, stars=2.5),
        _record("bbb", 9, stars="Qualified"),
        _record("bbb", 4, stars=99),  # not a leaderboard difficulty
    ]
    items = plan_card_items(records)

    assert [i.song_hash for i in items] == ["bbb", "aaa"]
    assert items[0].star_ratings.HARD == "7"
    assert items[0].star_ratings.EXP == "Qualified"
    assert items[0].star_ratings.ES == ""
    assert items[1].star_ratings.ES == "2.5"


def test_plan_reweight_items_one_per_record():
    from artgen.core.batch_driver import plan_reweight_items

    items = plan_reweight_items([
        _record("aaa", 7, songName="Alpha", oldStars=8.0, newStars=8.5),
        _record("aaa", 2, songName="Alpha", old_stars=3, new_stars=2),
    ])

    assert [i.difficulty for i in items] == ["EX", "ES"]
    assert items[0].old_star_ratings.EX == "8"
    assert items[0].new_star_ratings.EX == "8.5"
    assert items[1].new_star_ratings.ES == "2"


def test_in_memory_provider_lookup():
    from artgen.core.errors import MapNotFoundError
    from artgen.core.map_provider import InMemoryMapProvider

    provider = InMemoryMapProvider([_map("1a2b", "ABCDEF")])
    assert provider.fetch("abcdef").id == "1a2b"
    assert provider.fetch("1A2B").id == "1a2b"
    assert len(provider) == 1
    with pytest.raises(MapNotFoundError):
        provider.fetch("nope")


# ─── Driver ──────────────────────────────────────────────────────────────────

def test_card_batch_archives_and_skips(tmp_storage):
    from artgen.core.batch_driver import run_batch
    from artgen.core.job_store import InMemoryJobStore
    from artgen.core.map_provider import InMemoryMapProvider
    from artgen.models.job import JobKind, JobStatus
    from artgen.utils.storage import archive_path

    store = InMemoryJobStore()
    job = store.create_job(kind=JobKind.CARDS)
    provider = InMemoryMapProvider([_map("11", "h1", "First Song"), _map("22", "h2", "Second")])
    records = [_record("h1", 9, stars=11.2), _record("missing", 3, stars=4), _record("h2", 1, stars=1)]

    _run(run_batch(job.job_id, JobKind.CARDS, records, store, provider))

    done = store.get_job(job.job_id)
    assert done.status == JobStatus.DONE
    assert done.progress == 100
    assert done.result.succeeded == 2
    assert done.result.skipped == 1
    assert done.result.total == 3
    assert done.result.archive_url == f"/assets/{job.job_id}/map_cards.zip"

    with zipfile.ZipFile(archive_path(job.job_id, "map_cards.zip")) as zf:
        assert sorted(zf.namelist()) == ["first_song-11.png", "second-22.png"]
        png = zf.read("first_song-11.png")
    img = cv2.imdecode(np.frombuffer(png, np.uint8), cv2.IMREAD_UNCHANGED)
    assert img.shape == (300, 900, 4)


def test_reweight_batch_names_include_difficulty(tmp_storage):
    from artgen.core.batch_driver import run_batch
    from artgen.core.job_store import InMemoryJobStore
    from artgen.core.map_provider import InMemoryMapProvider
    from artgen.models.job import JobKind, JobStatus
    from artgen.utils.storage import archive_path

    store = InMemoryJobStore()
    job = store.create_job(kind=JobKind.REWEIGHTS)
    provider = InMemoryMapProvider([_map("7f", "hx")])
    records = [_record("hx", 7, songName="Hello World!", oldStars=9, newStars=9.4)]

    _run(run_batch(job.job_id, JobKind.REWEIGHTS, records, store, provider))

    assert store.get_job(job.job_id).status == JobStatus.DONE
    with zipfile.ZipFile(archive_path(job.job_id, "selected_reweight_cards.zip")) as zf:
        assert zf.namelist() == ["hello_world_-EX-7f.png"]
        img = cv2.imdecode(np.frombuffer(zf.read(zf.namelist()[0]), np.uint8), cv2.IMREAD_UNCHANGED)
    assert img.shape == (270, 800, 4)


def test_batch_reports_floor_progress_per_item(tmp_storage):
    from artgen.core.batch_driver import run_batch
    from artgen.core.job_store import InMemoryJobStore
    from artgen.core.map_provider import InMemoryMapProvider
    from artgen.models.job import JobKind

    class RecordingStore(InMemoryJobStore):
        def __init__(self):
            super().__init__()
            self.progress = []

        def report_progress(self, job_id, processed, total):
            value = super().report_progress(job_id, processed, total)
            self.progress.append(value)
            return value

    store = RecordingStore()
    job = store.create_job()
    provider = InMemoryMapProvider([_map("1", "a"), _map("2", "b"), _map("3", "c")])
    records = [_record(h, 1, stars=1) for h in ("a", "b", "c")]

    _run(run_batch(job.job_id, JobKind.CARDS, records, store, provider))

    assert store.progress == [33, 66, 100]


def test_cancel_stops_before_next_item(tmp_storage):
    from artgen.core.batch_driver import run_batch
    from artgen.core.job_store import InMemoryJobStore
    from artgen.core.map_provider import InMemoryMapProvider
    from artgen.models.job import JobKind, JobStatus
    from artgen.utils.storage import archive_path

    store = InMemoryJobStore()
    job = store.create_job()

    class CancellingProvider(InMemoryMapProvider):
        def fetch(self, id_or_hash):
            store.request_cancel(job.job_id)
            return super().fetch(id_or_hash)

    provider = CancellingProvider([_map("1", "a"), _map("2", "b"), _map("3", "c")])
    records = [_record(h, 1, stars=1) for h in ("a", "b", "c")]

    _run(run_batch(job.job_id, JobKind.CARDS, records, store, provider))

    cancelled = store.get_job(job.job_id)
    assert cancelled.status == JobStatus.CANCELLED
    assert cancelled.result is None
    assert cancelled.processed == 1
    assert cancelled.progress == 33
    assert not archive_path(job.job_id, "map_cards.zip").exists()


def test_empty_batch_completes_with_empty_archive(tmp_storage):
    from artgen.core.batch_driver import run_batch
    from artgen.core.job_store import InMemoryJobStore
    from artgen.core.map_provider import InMemoryMapProvider
    from artgen.models.job import JobKind, JobStatus
    from artgen.utils.storage import archive_path

    store = InMemoryJobStore()
    job = store.create_job()
    _run(run_batch(job.job_id, JobKind.CARDS, [], store, InMemoryMapProvider()))

    done = store.get_job(job.job_id)
    assert done.status == JobStatus.DONE
    assert done.result.total == 0
    with zipfile.ZipFile(archive_path(job.job_id, "map_cards.zip")) as zf:
        assert zf.namelist() == []


def test_fatal_error_fails_job(tmp_storage, monkeypatch):
    from artgen.core import batch_driver
    from artgen.core.job_store import InMemoryJobStore
    from artgen.core.map_provider import InMemoryMapProvider
    from artgen.models.job import JobKind, JobStatus

    def broken_dirs(job_id):
        raise OSError("read-only file system")

    monkeypatch.setattr(batch_driver, "init_job_dirs", broken_dirs)
    store = InMemoryJobStore()
    job = store.create_job()
    _run(batch_driver.run_batch(job.job_id, JobKind.CARDS, [], store, InMemoryMapProvider()))

    failed = store.get_job(job.job_id)
    assert failed.status == JobStatus.FAILED
    assert "read-only" in failed.error


# ─── HTTP Surface ────────────────────────────────────────────────────────────

from contextlib import asynccontextmanager
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager


@asynccontextmanager
async def lifespan_client():
    import os
    os.environ["JOB_STORE_BACKEND"] = "memory"
    os.environ["LOG_LEVEL"] = "WARNING"

    from artgen.config import get_settings
    get_settings.cache_clear()

    from artgen.main import create_app
    test_app = create_app()

    async with LifespanManager(test_app) as manager:
        transport = ASGITransport(app=manager.app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


async def _wait_for_terminal(client, job_id, attempts=50):
    for _ in range(attempts):
        body = (await client.get(f"/status/{job_id}")).json()
        if body["status"] in ("done", "failed", "cancelled"):
            return body
        await asyncio.sleep(0.05)
    raise AssertionError(f"job {job_id} did not finish: {body}")


@pytest.mark.asyncio
async def test_generate_card_endpoint(tmp_storage):
    payload = {
        "mapInfo": _map_doc("3a9f1", "abc", "Night Drive"),
        "starRatings": {"ES": 3, "EXP": "Unranked"},
        "useBackground": True,
    }
    async with lifespan_client() as c:
        resp = await c.post("/generate/card", json=payload)
    assert resp.status_code == 200
    assert resp.json()["image"].startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_generate_card_asset_errors(tmp_storage):
    bad_decode = _map_doc("1", "h")
    bad_decode["versions"][0]["coverURL"] = (
        "data:image/png;base64," + base64.b64encode(b"garbage").decode()
    )
    bad_fetch = _map_doc("2", "h")
    bad_fetch["versions"][0]["coverURL"] = "missing/cover.png"

    async with lifespan_client() as c:
        decode_resp = await c.post("/generate/card", json={"mapInfo": bad_decode})
        fetch_resp = await c.post("/generate/card", json={"mapInfo": bad_fetch})

    assert decode_resp.status_code == 422
    assert decode_resp.json()["error"]["code"] == "ASSET_DECODE_ERROR"
    assert fetch_resp.status_code == 502
    assert fetch_resp.json()["error"]["code"] == "ASSET_FETCH_ERROR"


@pytest.mark.asyncio
async def test_generate_thumbnail_endpoints(tmp_storage):
    async with lifespan_client() as c:
        playlist = await c.post(
            "/generate/playlist-thumbnail",
            json={"backgroundRef": _data_uri(w=64, h=64), "monthLabel": "May 2026"},
        )
        ssrm = await c.post(
            "/generate/ssrm-thumbnail",
            json={
                "mapInfo": _map_doc("9", "z"),
                "chosenDifficulty": "EXP",
                "starRatings": {"EXP": 12.3},
            },
        )
        bad = await c.post(
            "/generate/ssrm-thumbnail",
            json={"mapInfo": _map_doc("9", "z"), "chosenDifficulty": "INSANE"},
        )

    assert playlist.status_code == 200
    assert ssrm.status_code == 200
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_batch_flow_end_to_end(tmp_storage):
    payload = {
        "kind": "cards",
        "records": [
            {"songHash": "h1", "difficulty": 5, "stars": 6.5},
            {"songHash": "h1", "difficulty": 7, "stars": 8},
            {"songHash": "gone", "difficulty": 1, "stars": 1},
        ],
        "maps": [_map_doc("5c", "h1", "Only Map")],
    }
    async with lifespan_client() as c:
        created = await c.post("/batch", json=payload)
        assert created.status_code == 202
        job_id = created.json()["job_id"]

        status = await _wait_for_terminal(c, job_id)
        assert status["status"] == "done"
        assert status["result"]["succeeded"] == 1
        assert status["result"]["skipped"] == 1

        archive = await c.get(status["result"]["archive_url"])
        assert archive.status_code == 200
        assert archive.headers["content-type"] == "application/zip"

        cancel = await c.post(f"/batch/{job_id}/cancel")
        assert cancel.status_code == 200
        assert cancel.json()["cancel_requested"] is False
        assert cancel.json()["status"] == "done"

    with zipfile.ZipFile(io.BytesIO(archive.content)) as zf:
        assert zf.namelist() == ["only_map-5c.png"]


@pytest.mark.asyncio
async def test_assets_endpoint_guards(tmp_storage):
    async with lifespan_client() as c:
        unknown_job = await c.get("/assets/no-such-job/map_cards.zip")
        created = await c.post("/batch", json={"kind": "cards", "records": [], "maps": []})
        job_id = created.json()["job_id"]
        await _wait_for_terminal(c, job_id)
        missing = await c.get(f"/assets/{job_id}/other.zip")
        wrong_ext = await c.get(f"/assets/{job_id}/secrets.txt")

    assert unknown_job.status_code == 404
    assert unknown_job.json()["error"]["code"] == "JOB_NOT_FOUND"
    assert missing.status_code == 404
    assert wrong_ext.status_code == 403


def test_assets_path_traversal_rejected(tmp_storage):
    from fastapi import HTTPException
    from artgen.api.routes.assets import _safe_resolve

    with pytest.raises(HTTPException) as exc_info:
        _safe_resolve("job", "../../outside.zip")
    assert exc_info.value.status_code == 403
