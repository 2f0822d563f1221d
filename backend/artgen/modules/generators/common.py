# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Shared Generator Helpers
Font presets, the standard cover shadow, image loading policy
(required vs optional) and the script → data URI step.
"""

from __future__ import annotations

import time
from typing import Optional

import numpy as np

from artgen.core.errors import AssetError
from artgen.models.map_info import MapInfo
from artgen.modules.assets.loader import load_bitmap
from artgen.modules.compositing.canvas import Shadow
from artgen.utils.style_utils import FontSpec
from artgen.modules.generators.script import DrawText, Images, LayoutScript, render_script
from artgen.utils.logger import get_logger

log = get_logger(__name__)

# Families: bundled face first, Heebo second, then whatever the system has
TORUS = ("Torus Pro", "Heebo", "sans-serif")
HEEBO = ("Heebo", "sans-serif")
ALLER = ("Aller", "sans-serif")

COVER_SHADOW = Shadow(color="rgba(0, 0, 0, 0.5)", offset_x=10, offset_y=10, blur=5)


def torus(size: float, weight: int = 400) -> FontSpec:
    return FontSpec(families=TORUS, size=size, weight=weight)


def heebo(size: float, weight: int = 400) -> FontSpec:
    return FontSpec(families=HEEBO, size=size, weight=weight)


def aller(size: float, weight: int = 700) -> FontSpec:
    return FontSpec(families=ALLER, size=size, weight=weight)


def metadata_block(
    map_info: MapInfo,
    x: float,
    ys: tuple[float, float, float, float],
    fonts: tuple[FontSpec, FontSpec, FontSpec, FontSpec],
    max_width: float,
) -> list[DrawText]:
    """Author / song / subname / "Mapped by" lines, left-aligned and truncated."""
    meta = map_info.metadata
    lines = (
        meta.song_author_name,
        meta.song_name,
        meta.song_sub_name,
        f"Mapped by {meta.level_author_name}",
    )
    return [
        DrawText(text=text, x=x, y=y, font=font, max_width=max_width)
        for text, y, font in zip(lines, ys, fonts)
        if text
    ]


# ─── Image Loading Policy ────────────────────────────────────────────────────

def load_required(ref: str) -> np.ndarray:
    """Cover / background: failures abort the generation."""
    return load_bitmap(ref)


def load_optional(ref: Optional[str], role: str) -> Optional[np.ndarray]:
    """Decorative image: failures are logged and the image omitted."""
    if not ref:
        return None
    try:
        return load_bitmap(ref)
    except AssetError as exc:
        log.warning("optional_image_skipped", role=role, error=str(exc))
        return None


# ─── Output ──────────────────────────────────────────────────────────────────

def render_to_data_uri(script: LayoutScript, images: Images, generator: str) -> str:
    """Execute a script and encode the canvas as a PNG data URI."""
    t0 = time.perf_counter()
    uri = render_script(script, images).to_data_uri()
    log.info(
        "generation_complete",
        generator=generator,
        width=script.width,
        height=script.height,
        directives=len(script.directives),
        elapsed_ms=round((time.perf_counter() - t0) * 1000, 1),
    )
    return uri
