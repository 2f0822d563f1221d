# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Image Reference Loader
Resolves an image reference to a decoded RGBA bitmap.

Resolution order:
  1. data: URI            → decode inline (base64 or percent-encoded)
  2. http(s):// URL       → GET → decode
  3. root-relative "/x"   → existing file is read from disk, otherwise
                            rewritten to the dev-server origin → GET
  4. anything else        → filesystem path → read → decode

Bitmaps are not cached: cover art changes per call, only fonts,
logo and icons are memoised.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from urllib.parse import unquote_to_bytes

import httpx
import numpy as np

from artgen.config import get_settings
from artgen.core.errors import AssetDecodeError, AssetFetchError
from artgen.utils.image_utils import bytes_to_rgba
from artgen.utils.logger import get_logger

log = get_logger(__name__)


def load_bitmap(ref: str) -> np.ndarray:
    """
    Load and decode an image reference to RGBA uint8 (H×W×4).
    Raises AssetFetchError or AssetDecodeError.
    """
    data = fetch_bytes(ref)
    try:
        bitmap = bytes_to_rgba(data)
    except ValueError as exc:
        log.warning("asset_decode_failed", ref=ref[:80], error=str(exc))
        raise AssetDecodeError(ref, "Image bytes could not be decoded") from exc

    log.debug("asset_loaded", ref=ref[:80], width=bitmap.shape[1], height=bitmap.shape[0])
    return bitmap


def fetch_bytes(ref: str) -> bytes:
    """Raw bytes behind an image reference, without decoding."""
    ref = ref.strip()
    if not ref:
        raise AssetFetchError(ref, "Empty image reference")

    if ref.startswith("data:"):
        return _decode_data_uri(ref)

    if ref.startswith(("http://", "https://")):
        return _http_get(ref)

    if ref.startswith("/") and not ref.startswith("//"):
        path = Path(ref)
        if path.is_file():
            return _read_file(path, ref)
        origin = get_settings().dev_server_origin.rstrip("/")
        return _http_get(origin + ref)

    return _read_file(Path(ref), ref)


# ─── Resolvers ───────────────────────────────────────────────────────────────

def _decode_data_uri(ref: str) -> bytes:
    header, sep, payload = ref.partition(",")
    if not sep:
        raise AssetFetchError(ref, "Malformed data URI (no payload)")

    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise AssetFetchError(ref, "Malformed base64 data URI") from exc
    return unquote_to_bytes(payload)


def _http_get(url: str) -> bytes:
    timeout = get_settings().http_timeout_seconds
    try:
        resp = httpx.get(url, follow_redirects=True, timeout=timeout)
    except httpx.HTTPError as exc:
        log.warning("asset_fetch_failed", url=url, error=str(exc))
        raise AssetFetchError(url, f"Request failed: {type(exc).__name__}") from exc

    if not resp.is_success:
        log.warning("asset_fetch_failed", url=url, status_code=resp.status_code)
        raise AssetFetchError(url, f"HTTP {resp.status_code}")
    return resp.content


def _read_file(path: Path, ref: str) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        log.warning("asset_read_failed", path=str(path), error=str(exc))
        raise AssetFetchError(ref, f"Cannot read file: {exc.strerror or exc}") from exc
