# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ArtGen — Data Path Resolution
Card data payloads are caller-defined JSON trees. Paths are dotted
("metadata.songName", "versions.0.coverURL"): mapping keys by name,
sequence items by integer index.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Sequence

from artgen.models.map_info import format_rating_value

_TOKEN = re.compile(r"\{([^}]+)\}")


def resolve_path(document: Any, path: str) -> Optional[Any]:
    """Walk `path` through nested mappings/sequences; None when any step is missing."""
    if not path:
        return None
    node = document
    for part in path.split("."):
        if isinstance(node, Mapping):
            if part not in node:
                return None
            node = node[part]
        elif isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
            try:
                node = node[int(part)]
            except (ValueError, IndexError):
                return None
        else:
            return None
        if node is None:
            return None
    return node


def stringify(value: Any) -> str:
    """Display form of a resolved value; None and "" both render empty."""
    if value is None:
        return ""
    return format_rating_value(value)


def substitute_tokens(text: str, data: Any) -> str:
    """Replace every {dotted.path} with its resolved value (missing → "")."""
    if not text or "{" not in text:
        return text
    return _TOKEN.sub(lambda m: stringify(resolve_path(data, m.group(1).strip())), text)


def resolve_token(value: str, data: Any) -> str:
    """A whole-string "{path}" resolves through `data`; anything else is literal."""
    if len(value) > 2 and value.startswith("{") and value.endswith("}"):
        return stringify(resolve_path(data, value[1:-1].strip()))
    return value
