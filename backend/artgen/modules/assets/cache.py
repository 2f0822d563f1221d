# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Process-wide Asset Cache
Memoises immutable decoded assets (fonts, logo, icon glyphs).
Populated lazily, never invalidated during normal operation.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Hashable, TypeVar

from artgen.utils.logger import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class AssetCache:
    """
    Dict + Lock with check-then-set semantics.
    The loader runs outside the lock; if two threads race on the same key
    the first stored value wins and both callers receive it.
    Loader exceptions propagate and nothing is stored.
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, Any] = {}
        self._lock = threading.Lock()

    def get_or_load(self, key: Hashable, loader: Callable[[], T]) -> T:
        with self._lock:
            if key in self._entries:
                return self._entries[key]

        value = loader()

        with self._lock:
            stored = self._entries.setdefault(key, value)
        if stored is value:
            log.debug("asset_cached", key=str(key))
        return stored

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Drop every entry. Only tests should need this."""
        with self._lock:
            self._entries.clear()


_cache = AssetCache()


def get_asset_cache() -> AssetCache:
    return _cache
