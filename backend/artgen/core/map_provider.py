# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Map Data Providers
The batch driver resolves each record's song hash to a MapInfo through a
MapDataProvider. InMemoryMapProvider serves map documents supplied with
the request.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from artgen.core.errors import MapNotFoundError
from artgen.models.map_info import MapInfo


class MapDataProvider(Protocol):
    def fetch(self, id_or_hash: str) -> MapInfo:
        """Return the map for a map id or any version hash; raise MapNotFoundError."""
        ...


class InMemoryMapProvider:
    """Lookup by map id or version hash, case-insensitive."""

    def __init__(self, maps: Iterable[MapInfo] = ()) -> None:
        self._maps: dict[str, MapInfo] = {}
        for map_info in maps:
            self.add(map_info)

    def add(self, map_info: MapInfo) -> None:
        self._maps[map_info.id.lower()] = map_info
        for h in map_info.hashes():
            self._maps[h] = map_info

    def fetch(self, id_or_hash: str) -> MapInfo:
        try:
            return self._maps[id_or_hash.lower()]
        except KeyError:
            raise MapNotFoundError(id_or_hash) from None

    def __len__(self) -> int:
        return len({m.id for m in self._maps.values()})
