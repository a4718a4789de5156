"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deterministic cache-key construction.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any


def canonical_json(params: Mapping[str, Any]) -> str:
    """
    Serialize `params` compactly with keys sorted at every depth.

    Two mappings holding the same key/value pairs in any insertion order
    produce identical output. `None` values serialize as `null`.
    """
    return json.dumps(
        dict(params),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def generate_cache_key(base: str, params: Mapping[str, Any] | None = None) -> str:
    """Build `"<base>:<canonical json of params>"`."""
    return f"{base}:{canonical_json(params or {})}"
