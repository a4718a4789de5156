"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Header construction and request-parameter validation for edge handlers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_MAX_AGE_S = 86400


def get_cors_headers(origin: str = "*") -> dict[str, str]:
    """Return CORS response headers allowing `origin`."""
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        "Access-Control-Max-Age": str(CORS_MAX_AGE_S),
    }


def combine_headers(*header_sets: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings left to right; later values win."""
    merged: dict[str, str] = {}
    for headers in header_sets:
        if headers:
            merged.update(headers)
    return merged


@dataclass(frozen=True, slots=True)
class ParamValidation:
    """Outcome of a required-field check."""

    is_valid: bool
    missing_fields: list[str] = field(default_factory=list)


def validate_params(
    params: Mapping[str, Any] | None,
    required_fields: Iterable[str],
) -> ParamValidation:
    """
    Report required fields that are absent, `None` or the empty string.

    Missing fields are listed in the order they were required.
    """
    values = params or {}
    missing = [
        name for name in required_fields if values.get(name) is None or values.get(name) == ""
    ]
    return ParamValidation(is_valid=not missing, missing_fields=missing)
