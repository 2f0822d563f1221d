# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Text Fitter
Width-budget fitting for single-line labels. Both loops may give up
before fitting: a bare ellipsis from truncate() and an overflowing
min_size from shrink_to_fit() are the accepted degraded outputs.
"""

from __future__ import annotations

from typing import Callable

ELLIPSIS = "…"


def truncate(
    text: str,
    max_width: float,
    measure: Callable[[str], float],
    ellipsis: str = ELLIPSIS,
) -> str:
    """Drop trailing characters until text + ellipsis fits max_width."""
    if measure(text) <= max_width:
        return text

    candidate = text
    while candidate:
        candidate = candidate[:-1]
        if measure(candidate + ellipsis) <= max_width:
            return candidate + ellipsis
    return ellipsis


def shrink_to_fit(
    text: str,
    max_width: float,
    start_size: float,
    min_size: float,
    measure_at_size: Callable[[str, float], float],
    step: float = 2,
) -> float:
    """Largest size from start_size down in `step` px decrements that fits."""
    size = start_size
    while measure_at_size(text, size) > max_width and size > min_size:
        size -= step
    return size
