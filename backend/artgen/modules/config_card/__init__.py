# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Config Card Module
Public API for rendering declarative CardConfig documents.
"""

from artgen.modules.config_card.interpreter import (
    compile_card_config,
    generate_card_from_config,
    render_card_config,
    validate_config,
)
from artgen.modules.config_card.resolver import resolve_path, resolve_token, substitute_tokens

__all__ = [
    "validate_config",
    "compile_card_config",
    "render_card_config",
    "generate_card_from_config",
    "resolve_path",
    "resolve_token",
    "substitute_tokens",
]
