# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Generators Module
Fixed-layout artwork generators and the layout-script executor they share.
"""

from artgen.modules.generators.batch_thumbnail import generate_batch_thumbnail
from artgen.modules.generators.card import generate_card
from artgen.modules.generators.playlist_thumbnail import generate_playlist_thumbnail
from artgen.modules.generators.reweight_card import RatingTrend, generate_reweight_card, rating_trend
from artgen.modules.generators.script import LayoutScript, render_script
from artgen.modules.generators.ssrm_thumbnail import generate_ssrm_thumbnail

__all__ = [
    # Executor
    "LayoutScript",
    "render_script",
    # Generators
    "generate_card",
    "generate_reweight_card",
    "generate_batch_thumbnail",
    "generate_playlist_thumbnail",
    "generate_ssrm_thumbnail",
    # Reweight helpers
    "RatingTrend",
    "rating_trend",
]
