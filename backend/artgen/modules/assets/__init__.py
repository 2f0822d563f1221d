# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Assets Module
Public API for image references, fonts, the logo and icon glyphs.
"""

from artgen.modules.assets.cache import AssetCache, get_asset_cache
from artgen.modules.assets.fonts import bundled_font_path, get_font, measure_text
from artgen.modules.assets.icons import ICON_NAMES, load_icon, load_logo
from artgen.modules.assets.loader import fetch_bytes, load_bitmap

__all__ = [
    # Loader
    "load_bitmap",
    "fetch_bytes",
    # Cache
    "AssetCache",
    "get_asset_cache",
    # Fonts
    "get_font",
    "measure_text",
    "bundled_font_path",
    # Icons
    "ICON_NAMES",
    "load_icon",
    "load_logo",
]
