"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

HTTP boundary helpers for edge handlers built on the cache.
"""

from .admin import CacheAdminHost, CacheAdminHostError
from .headers import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_MAX_AGE_S,
    ParamValidation,
    combine_headers,
    get_cors_headers,
    validate_params,
)
from .responses import envelope_to_response, preflight_response

__all__ = [
    "CacheAdminHost",
    "CacheAdminHostError",
    "CORS_ALLOW_HEADERS",
    "CORS_ALLOW_METHODS",
    "CORS_MAX_AGE_S",
    "ParamValidation",
    "combine_headers",
    "get_cors_headers",
    "validate_params",
    "envelope_to_response",
    "preflight_response",
]
