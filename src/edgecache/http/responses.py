"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Conversion of cache envelopes into HTTP responses.
"""

from __future__ import annotations

from collections.abc import Mapping

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from ..fetch import CacheEnvelope
from .headers import combine_headers, get_cors_headers


def envelope_to_response(
    envelope: CacheEnvelope,
    *,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """
    Render an envelope as JSON.

    Failed envelopes become a 500 carrying `{"error": "<message>"}` and the
    envelope's `no-store` headers. Extra `headers` are merged first so the
    envelope's cache headers always win.
    """
    merged = combine_headers(headers, envelope.headers)
    if envelope.error is not None:
        return JSONResponse(
            status_code=500,
            content={"error": str(envelope.error) or type(envelope.error).__name__},
            headers=merged,
        )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope.data),
        headers=merged,
    )


def preflight_response(origin: str = "*") -> Response:
    """Empty 204 reply to a CORS preflight request."""
    return Response(status_code=204, headers=get_cors_headers(origin))
