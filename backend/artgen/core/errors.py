# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Engine Error Taxonomy
Raised by the composition engine and translated to HTTP responses by
api/middleware/error_handler.py.

AssetError      — a required image could not be fetched or decoded
ConfigError     — a CardConfig document failed validation (before drawing)
RenderError     — the engine was asked to draw onto an impossible surface
"""

from __future__ import annotations

from typing import Optional


class AssetError(RuntimeError):
    """Base class for image reference resolution failures."""

    def __init__(self, ref: str, reason: str) -> None:
        self.ref = ref
        self.reason = reason
        super().__init__(f"{reason} ({_short_ref(ref)})")


class AssetFetchError(AssetError):
    """Non-2xx response, network failure or unreadable local path."""


class AssetDecodeError(AssetError):
    """Bytes were retrieved but are not a supported image format."""


class ConfigError(ValueError):
    """Base class for CardConfig problems."""


class InvalidSchemaError(ConfigError):
    """CardConfig is missing required fields or has wrongly typed ones."""

    def __init__(self, message: str, errors: Optional[list] = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class RenderError(RuntimeError):
    """Base class for drawing-surface problems."""


class InvalidCanvasSizeError(RenderError):
    """Canvas width or height is not a positive integer."""


class MapNotFoundError(KeyError):
    """A map provider has no MapInfo for the requested id or hash."""


def _short_ref(ref: str, limit: int = 80) -> str:
    # data URIs can be megabytes long
    return ref if len(ref) <= limit else ref[:limit] + "..."
