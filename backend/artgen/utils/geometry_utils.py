# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Geometry Utilities
Pure helpers shared by the compositor and the generators: aspect-ratio
crop windows, pan/zoom matrices and anti-aliased coverage masks.
All matrices are 3×3 float64 in (x, y, 1) column-vector convention.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import cv2
import numpy as np

from artgen.models.transform import BackgroundTransform

# Coverage masks are rasterised at this multiple and area-downsampled
_SUPERSAMPLE = 4


# ─── Crop Windows ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CropWindow:
    """Region of a source image in source pixel space."""
    source_x: float
    source_y: float
    source_width: float
    source_height: float

    @property
    def ratio(self) -> float:
        return self.source_width / self.source_height


def crop_to_aspect(source_w: float, source_h: float, target_ratio: float) -> CropWindow:
    """
    Largest centred window of the source with width/height == target_ratio.
    Wider sources lose columns on both sides, taller sources lose rows.
    """
    if source_w <= 0 or source_h <= 0 or target_ratio <= 0:
        raise ValueError(
            f"crop_to_aspect needs positive sizes, got {source_w}x{source_h} "
            f"ratio={target_ratio}"
        )

    if source_w / source_h > target_ratio:
        crop_h = float(source_h)
        crop_w = source_h * target_ratio
    else:
        crop_w = float(source_w)
        crop_h = source_w / target_ratio

    return CropWindow(
        source_x=(source_w - crop_w) / 2.0,
        source_y=(source_h - crop_h) / 2.0,
        source_width=crop_w,
        source_height=crop_h,
    )


# ─── Affine Matrices ─────────────────────────────────────────────────────────

def translation(tx: float, ty: float) -> np.ndarray:
    m = np.eye(3, dtype=np.float64)
    m[0, 2] = tx
    m[1, 2] = ty
    return m


def scaling(sx: float, sy: Optional[float] = None) -> np.ndarray:
    m = np.eye(3, dtype=np.float64)
    m[0, 0] = sx
    m[1, 1] = sx if sy is None else sy
    return m


def apply_transform(
    transform: Optional[BackgroundTransform],
    canvas_w: float,
    canvas_h: float,
) -> np.ndarray:
    """
    Pan/zoom matrix: zoom about the canvas centre, then pan by the raw
    pixel offsets. Independent of any crop window. None is identity.
    """
    if transform is None:
        return np.eye(3, dtype=np.float64)
    cx, cy = canvas_w / 2.0, canvas_h / 2.0
    return (
        translation(cx + transform.x, cy + transform.y)
        @ scaling(transform.scale)
        @ translation(-cx, -cy)
    )


def rect_to_rect(
    src: tuple[float, float, float, float],
    dst: tuple[float, float, float, float],
) -> np.ndarray:
    """Matrix mapping rect (x, y, w, h) src onto rect dst."""
    sx, sy, sw, sh = src
    dx, dy, dw, dh = dst
    return translation(dx, dy) @ scaling(dw / sw, dh / sh) @ translation(-sx, -sy)


def matrix_scale(m: np.ndarray) -> float:
    """Geometric mean scale factor of the linear part of m."""
    return math.sqrt(abs(float(np.linalg.det(m[:2, :2]))))


# ─── Coverage Masks ──────────────────────────────────────────────────────────

def _bbox(
    shape: tuple[int, int], x0: float, y0: float, x1: float, y1: float
) -> Optional[tuple[int, int, int, int]]:
    """Integer pixel box covering [x0,x1)×[y0,y1), clamped to shape (h, w)."""
    h, w = shape
    ix0 = max(int(math.floor(x0)), 0)
    iy0 = max(int(math.floor(y0)), 0)
    ix1 = min(int(math.ceil(x1)), w)
    iy1 = min(int(math.ceil(y1)), h)
    if ix1 <= ix0 or iy1 <= iy0:
        return None
    return ix0, iy0, ix1, iy1


def _finish_mask(
    shape: tuple[int, int],
    box: tuple[int, int, int, int],
    hi_res: np.ndarray,
) -> np.ndarray:
    ix0, iy0, ix1, iy1 = box
    mask = np.zeros(shape, dtype=np.float32)
    small = cv2.resize(
        hi_res, (ix1 - ix0, iy1 - iy0), interpolation=cv2.INTER_AREA
    )
    mask[iy0:iy1, ix0:ix1] = small.astype(np.float32) / 255.0
    return mask


def rounded_rect_mask(
    shape: tuple[int, int],
    x: float, y: float, w: float, h: float,
    radius: float,
) -> np.ndarray:
    """
    Anti-aliased float32 coverage (0..1) of a rounded rectangle on a
    canvas of shape (h, w). Radius is clamped to half the shorter side.
    Empty mask for non-positive sizes.
    """
    if w <= 0 or h <= 0:
        return np.zeros(shape, dtype=np.float32)
    box = _bbox(shape, x, y, x + w, y + h)
    if box is None:
        return np.zeros(shape, dtype=np.float32)

    ix0, iy0, ix1, iy1 = box
    ss = _SUPERSAMPLE
    hi = np.zeros(((iy1 - iy0) * ss, (ix1 - ix0) * ss), dtype=np.uint8)

    r = max(0.0, min(radius, w / 2.0, h / 2.0))
    # Rect corners in supersampled local coordinates
    lx0 = (x - ix0) * ss
    ly0 = (y - iy0) * ss
    lx1 = lx0 + w * ss
    ly1 = ly0 + h * ss
    rs = r * ss

    def pt(px: float, py: float) -> tuple[int, int]:
        return int(round(px)), int(round(py))

    if rs < 0.5:
        cv2.rectangle(hi, pt(lx0, ly0), pt(lx1 - 1, ly1 - 1), 255, -1)
    else:
        cv2.rectangle(hi, pt(lx0 + rs, ly0), pt(lx1 - rs - 1, ly1 - 1), 255, -1)
        cv2.rectangle(hi, pt(lx0, ly0 + rs), pt(lx1 - 1, ly1 - rs - 1), 255, -1)
        ir = int(round(rs))
        for cx, cy in (
            (lx0 + rs, ly0 + rs),
            (lx1 - rs - 1, ly0 + rs),
            (lx0 + rs, ly1 - rs - 1),
            (lx1 - rs - 1, ly1 - rs - 1),
        ):
            cv2.circle(hi, pt(cx, cy), ir, 255, -1)

    return _finish_mask(shape, box, hi)


def polygon_mask(
    shape: tuple[int, int],
    points: Sequence[tuple[float, float]],
) -> np.ndarray:
    """Anti-aliased coverage of a filled polygon (any winding, even-odd not needed)."""
    if len(points) < 3:
        return np.zeros(shape, dtype=np.float32)
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    box = _bbox(shape, min(xs), min(ys), max(xs), max(ys))
    if box is None:
        return np.zeros(shape, dtype=np.float32)

    ix0, iy0, ix1, iy1 = box
    ss = _SUPERSAMPLE
    hi = np.zeros(((iy1 - iy0) * ss, (ix1 - ix0) * ss), dtype=np.uint8)
    local = np.array(
        [[round((px - ix0) * ss), round((py - iy0) * ss)] for px, py in points],
        dtype=np.int32,
    )
    cv2.fillPoly(hi, [local], 255)
    return _finish_mask(shape, box, hi)


def circle_mask(
    shape: tuple[int, int], cx: float, cy: float, radius: float
) -> np.ndarray:
    if radius <= 0:
        return np.zeros(shape, dtype=np.float32)
    return rounded_rect_mask(
        shape, cx - radius, cy - radius, 2 * radius, 2 * radius, radius
    )


def star_points(
    cx: float, cy: float, outer_radius: float, inner_ratio: float = 0.4,
    spikes: int = 5,
) -> list[tuple[float, float]]:
    """Vertices of a point-up star, alternating outer and inner radius."""
    points = []
    inner = outer_radius * inner_ratio
    for i in range(spikes * 2):
        r = outer_radius if i % 2 == 0 else inner
        angle = -math.pi / 2 + i * math.pi / spikes
        points.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
    return points
