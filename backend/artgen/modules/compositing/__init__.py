# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Compositing Module
Public API for the raster canvas.
"""

from artgen.modules.compositing.canvas import Canvas, Shadow

__all__ = ["Canvas", "Shadow"]
