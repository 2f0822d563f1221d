# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Font Resolution
Maps a FontSpec onto a bundled TTF file under settings.fonts_dir:

    Torus Pro  → Torus.Pro/TorusPro-<Weight>[Italic].ttf
    Heebo      → Heebo/Heebo-<Weight>.ttf       (no italics)
    Aller      → Aller_It.ttf                   (single face)
    Jura       → Jura-<Weight>.ttf              (Light..Bold)

Unknown or missing families fall through to the next family in the
spec, then to system DejaVu, then to Pillow's built-in scalable font.
A missing font is never fatal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Union

from PIL import ImageFont

from artgen.config import get_settings
from artgen.modules.assets.cache import get_asset_cache
from artgen.utils.style_utils import FontSpec
from artgen.utils.logger import get_logger

log = get_logger(__name__)

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


# ─── Weight Buckets ──────────────────────────────────────────────────────────

def weight_bucket(weight: int) -> str:
    """CSS numeric weight → face name bucket."""
    if weight <= 100:
        return "Thin"
    if weight <= 300:
        return "Light"
    if weight <= 400:
        return "Regular"
    if weight <= 500:
        return "Medium"
    if weight <= 600:
        return "SemiBold"
    if weight <= 700:
        return "Bold"
    return "Heavy"


# ─── Family File Tables ──────────────────────────────────────────────────────

def _torus_file(bucket: str, italic: bool) -> str:
    # No Medium cut; Regular stands in
    face = "Regular" if bucket == "Medium" else bucket
    if italic:
        face = "Italic" if face == "Regular" else f"{face}Italic"
    return f"Torus.Pro/TorusPro-{face}.ttf"


def _heebo_file(bucket: str, italic: bool) -> str:
    face = "Black" if bucket == "Heavy" else bucket
    return f"Heebo/Heebo-{face}.ttf"


def _aller_file(bucket: str, italic: bool) -> str:
    return "Aller_It.ttf"


def _jura_file(bucket: str, italic: bool) -> str:
    face = {"Thin": "Light", "Heavy": "Bold"}.get(bucket, bucket)
    return f"Jura-{face}.ttf"


_BUNDLED_FAMILIES: list[tuple[str, Callable[[str, bool], str]]] = [
    ("torus", _torus_file),
    ("heebo", _heebo_file),
    ("aller", _aller_file),
    ("jura", _jura_file),
]

# System faces tried after every requested family failed
_SYSTEM_FALLBACKS: dict[bool, tuple[str, ...]] = {
    False: ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf"),
    True: ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf"),
}


def bundled_font_path(family: str, weight: int = 400, italic: bool = False) -> Optional[Path]:
    """Bundled file for a family name, or None if the family is not bundled."""
    name = family.lower()
    for key, file_for in _BUNDLED_FAMILIES:
        if key in name:
            return get_settings().fonts_dir / file_for(weight_bucket(weight), italic)
    return None


# ─── Loading ─────────────────────────────────────────────────────────────────

def _load_truetype(source: Union[str, Path], size: float) -> Font:
    return get_asset_cache().get_or_load(
        ("font", str(source), size),
        lambda: ImageFont.truetype(str(source), size),
    )


def _resolve(spec: FontSpec) -> Font:
    for family in spec.families:
        path = bundled_font_path(family, spec.weight, spec.italic)
        if path is None:
            continue
        if not path.is_file():
            log.warning("font_file_missing", family=family, path=str(path))
            continue
        try:
            return _load_truetype(path, spec.size)
        except (OSError, ValueError) as exc:
            log.warning("font_load_failed", family=family, path=str(path), error=str(exc))

    for name in _SYSTEM_FALLBACKS[spec.weight >= 600]:
        try:
            font = _load_truetype(name, spec.size)
        except (OSError, ValueError):
            continue
        log.debug("font_fallback", requested=list(spec.families), used=name)
        return font

    log.warning("font_builtin_fallback", requested=list(spec.families), size=spec.size)
    return ImageFont.load_default(size=max(spec.size, 1))


def get_font(spec: FontSpec) -> Font:
    """Sized font handle for a spec, memoised per spec."""
    return get_asset_cache().get_or_load(("font_spec", spec), lambda: _resolve(spec))


def measure_text(text: str, spec: FontSpec) -> float:
    """Advance width of text in pixels."""
    if not text:
        return 0.0
    return float(get_font(spec).getlength(text))
