"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

FastAPI host exposing cache inspection and invalidation endpoints.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from starlette.requests import Request

from ..fetch import CachedFetcher
from .headers import get_cors_headers, validate_params
from .responses import preflight_response


class CacheAdminHostError(RuntimeError):
    """Raised for invalid cache admin host setup."""


class CacheAdminHost:
    """Expose one fetcher's store over HTTP for operators and dashboards."""

    def __init__(
        self,
        fetcher: CachedFetcher,
        *,
        service_name: str = "edgecache-admin",
        cors_origin: str = "*",
    ) -> None:
        if not cors_origin.strip():
            raise CacheAdminHostError("cors_origin must be non-empty")
        self.fetcher = fetcher
        self.service_name = service_name
        self.cors_origin = cors_origin

    def create_app(self):
        """Create and return FastAPI app exposing cache endpoints."""
        app = FastAPI(title=self.service_name)
        store = self.fetcher.store
        cors = get_cors_headers(self.cors_origin)

        @app.middleware("http")
        async def add_cors_headers(request: Request, call_next):
            response = await call_next(request)
            for name, value in cors.items():
                response.headers.setdefault(name, value)
            return response

        @app.options("/{path:path}")
        async def preflight(path: str):
            _ = path
            return preflight_response(self.cors_origin)

        @app.get("/cache/stats")
        async def stats() -> dict[str, Any]:
            return asdict(store.get_stats())

        @app.get("/cache/keys")
        async def keys() -> dict[str, Any]:
            return {"keys": store.get_keys()}

        @app.get("/cache/keys/{key:path}/ttl")
        async def key_ttl(key: str) -> dict[str, Any]:
            ttl = store.get_ttl(key)
            if ttl is None:
                raise HTTPException(status_code=404, detail=f"Unknown cache key '{key}'")
            return {"key": key, "ttl_s": ttl}

        @app.delete("/cache/keys/{key:path}")
        async def delete_key(key: str) -> dict[str, Any]:
            if not store.delete(key):
                raise HTTPException(status_code=404, detail=f"Unknown cache key '{key}'")
            return {"deleted": key}

        @app.post("/cache/invalidate")
        async def invalidate(payload: dict[str, Any]) -> dict[str, Any]:
            check = validate_params(payload, ["prefix"])
            if not check.is_valid:
                raise HTTPException(
                    status_code=422,
                    detail={"missing_fields": check.missing_fields},
                )
            prefix = str(payload["prefix"])
            return {"prefix": prefix, "removed": self.fetcher.invalidate_prefix(prefix)}

        @app.post("/cache/clear")
        async def clear() -> dict[str, Any]:
            store.clear()
            return {"cleared": True}

        return app
