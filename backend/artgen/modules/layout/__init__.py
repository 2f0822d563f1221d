# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Layout Module
Text fitting and badge-row packing. Pure functions, no drawing.
"""

from artgen.modules.layout.badges import STAR_SUFFIX, Badge, layout_badges, rating_triples
from artgen.modules.layout.text_fit import ELLIPSIS, shrink_to_fit, truncate

__all__ = [
    "ELLIPSIS",
    "truncate",
    "shrink_to_fit",
    "STAR_SUFFIX",
    "Badge",
    "layout_badges",
    "rating_triples",
]
