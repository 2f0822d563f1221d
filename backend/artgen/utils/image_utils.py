# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Image Codec and Conversion Utilities
The engine works on RGBA uint8 bitmaps. OpenCV handles decode/encode
(BGR(A) at its boundary); Pillow is the fallback decoder and the bridge
used for text rasterisation.
"""

from __future__ import annotations

import base64
import io

import cv2
import numpy as np
from PIL import Image

PNG_DATA_URI_PREFIX = "data:image/png;base64,"


# ─── Decode ──────────────────────────────────────────────────────────────────

def to_rgba_uint8(img: np.ndarray) -> np.ndarray:
    """
    Normalise any OpenCV decode result (gray, BGR, BGRA, 16-bit) to
    RGBA uint8 (H×W×4).
    """
    if img.dtype == np.uint16:
        img = (img / 257.0).round().astype(np.uint8)
    elif img.dtype != np.uint8:
        img = np.clip(img, 0, 255).astype(np.uint8)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    channels = img.shape[2]
    if channels == 1:
        return cv2.cvtColor(img[:, :, 0], cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)


def bytes_to_rgba(data: bytes) -> np.ndarray:
    """
    Decode raw image bytes to an RGBA uint8 array.
    OpenCV first (PNG/JPEG/WebP/BMP), Pillow second (GIF and friends).
    Raises ValueError if neither can decode the bytes.
    """
    if not data:
        raise ValueError("Empty image payload.")

    arr = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_UNCHANGED)
    if img is not None:
        return to_rgba_uint8(img)

    try:
        with Image.open(io.BytesIO(data)) as pil_img:
            return pil_to_rgba(pil_img)
    except (OSError, Image.DecompressionBombError) as exc:
        raise ValueError(f"Could not decode image bytes: {exc}") from exc


# ─── Encode ──────────────────────────────────────────────────────────────────

def rgba_to_png_bytes(img: np.ndarray) -> bytes:
    """Encode an RGBA uint8 array to PNG bytes (lossless)."""
    success, buf = cv2.imencode(".png", cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA))
    if not success:
        raise RuntimeError("Failed to encode image to PNG bytes.")
    return buf.tobytes()


def png_data_uri(png: bytes) -> str:
    return PNG_DATA_URI_PREFIX + base64.b64encode(png).decode("ascii")


def data_uri_to_bytes(uri: str) -> bytes:
    """Payload of a base64 data URI, e.g. the output of any generator."""
    _, _, payload = uri.partition(",")
    return base64.b64decode(payload)


# ─── PIL Bridge ──────────────────────────────────────────────────────────────

def pil_to_rgba(pil_img: Image.Image) -> np.ndarray:
    """Convert any PIL image (first frame) to RGBA uint8 numpy array."""
    return np.array(pil_img.convert("RGBA"))
