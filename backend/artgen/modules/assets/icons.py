# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Fixed Decorative Assets
Product logo and the metadata-row icon glyphs (key, metronome, clock).
Icons are rasterised procedurally as white-on-transparent RGBA at 4×
and area-downsampled, cached per (name, size). Both are optional:
failures are logged and None is returned so generators omit them.
"""

from __future__ import annotations

from typing import Callable, Optional

import cv2
import numpy as np

from artgen.config import get_settings
from artgen.core.errors import AssetError
from artgen.modules.assets.cache import get_asset_cache
from artgen.modules.assets.loader import load_bitmap
from artgen.utils.logger import get_logger

log = get_logger(__name__)

_ICON_SUPERSAMPLE = 4
_WHITE = 255


# ─── Logo ────────────────────────────────────────────────────────────────────

def load_logo() -> Optional[np.ndarray]:
    """Product logo bitmap, memoised after the first successful load."""
    path = get_settings().logo_path
    try:
        return get_asset_cache().get_or_load(("logo", str(path)), lambda: load_bitmap(str(path)))
    except AssetError as exc:
        log.warning("logo_unavailable", path=str(path), error=str(exc))
        return None


# ─── Icon Glyphs ─────────────────────────────────────────────────────────────
# Each painter draws into a square uint8 alpha plane of side s.

def _paint_key(plane: np.ndarray, s: int) -> None:
    t = max(1, s // 10)
    bow_c = (int(s * 0.30), int(s * 0.50))
    cv2.circle(plane, bow_c, int(s * 0.20), _WHITE, t, cv2.LINE_AA)
    shaft_y = bow_c[1]
    cv2.line(plane, (int(s * 0.50), shaft_y), (int(s * 0.90), shaft_y), _WHITE, t, cv2.LINE_AA)
    for tx in (0.72, 0.86):
        cv2.line(
            plane,
            (int(s * tx), shaft_y),
            (int(s * tx), int(s * 0.68)),
            _WHITE, t, cv2.LINE_AA,
        )


def _paint_metronome(plane: np.ndarray, s: int) -> None:
    t = max(1, s // 10)
    body = np.array(
        [
            [int(s * 0.38), int(s * 0.10)],
            [int(s * 0.62), int(s * 0.10)],
            [int(s * 0.82), int(s * 0.90)],
            [int(s * 0.18), int(s * 0.90)],
        ],
        dtype=np.int32,
    )
    cv2.polylines(plane, [body], True, _WHITE, t, cv2.LINE_AA)
    cv2.line(plane, (int(s * 0.22), int(s * 0.74)), (int(s * 0.78), int(s * 0.74)), _WHITE, t, cv2.LINE_AA)
    cv2.line(plane, (int(s * 0.50), int(s * 0.74)), (int(s * 0.74), int(s * 0.22)), _WHITE, t, cv2.LINE_AA)


def _paint_clock(plane: np.ndarray, s: int) -> None:
    t = max(1, s // 10)
    c = (s // 2, s // 2)
    cv2.circle(plane, c, int(s * 0.40), _WHITE, t, cv2.LINE_AA)
    cv2.line(plane, c, (c[0], int(s * 0.24)), _WHITE, t, cv2.LINE_AA)
    cv2.line(plane, c, (int(s * 0.70), int(s * 0.62)), _WHITE, t, cv2.LINE_AA)


_PAINTERS: dict[str, Callable[[np.ndarray, int], None]] = {
    "key": _paint_key,
    "metronome": _paint_metronome,
    "clock": _paint_clock,
}

ICON_NAMES = tuple(_PAINTERS)


def _render_icon(name: str, size: int) -> np.ndarray:
    hi = size * _ICON_SUPERSAMPLE
    plane = np.zeros((hi, hi), dtype=np.uint8)
    _PAINTERS[name](plane, hi)
    alpha = cv2.resize(plane, (size, size), interpolation=cv2.INTER_AREA)
    icon = np.zeros((size, size, 4), dtype=np.uint8)
    icon[:, :, :3] = _WHITE
    icon[:, :, 3] = alpha
    return icon


def load_icon(name: str, size: int) -> Optional[np.ndarray]:
    """White RGBA glyph of side `size`, or None for unknown names."""
    if name not in _PAINTERS or size <= 0:
        log.warning("icon_unavailable", icon=name, size=size)
        return None
    return get_asset_cache().get_or_load(("icon", name, size), lambda: _render_icon(name, size))
