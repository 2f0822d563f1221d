# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Background Pan/Zoom Model
Applied about the canvas centre before a thumbnail background is drawn.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BackgroundTransform(BaseModel):
    model_config = ConfigDict(frozen=True)

    scale: float = Field(1.0, gt=0, description="Zoom factor about the canvas centre")
    x: float = Field(0.0, description="Horizontal pan in output pixels")
    y: float = Field(0.0, description="Vertical pan in output pixels")

    @property
    def is_identity(self) -> bool:
        return self.scale == 1.0 and self.x == 0.0 and self.y == 0.0
