"""
Edge handler serving cached dashboard stats.

Run with:
  uvicorn examples.dashboard_edge_handler:app --reload
"""

from __future__ import annotations

import asyncio
import random

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from edgecache import (
    CACHE_KEYS,
    TTL,
    CacheConfig,
    CachedFetcher,
    CacheSettings,
    TTLCacheStore,
    generate_cache_key,
    get_cors_headers,
    validate_params,
)
from edgecache.http import CacheAdminHost, envelope_to_response, preflight_response

settings = CacheSettings.from_env()
store = TTLCacheStore.from_settings(settings)
fetcher = CachedFetcher(store)

app = FastAPI(title="dashboard-edge")
app.mount("/admin", CacheAdminHost(fetcher, cors_origin=settings.cors_origin).create_app())


async def load_dashboard_stats(org_id: str, range_: str) -> dict[str, object]:
    await asyncio.sleep(0.2)
    return {"org_id": org_id, "range": range_, "open_leads": random.randint(0, 50)}


@app.options("/dashboard/stats")
async def stats_preflight():
    return preflight_response(settings.cors_origin)


@app.get("/dashboard/stats")
async def dashboard_stats(request: Request):
    params = dict(request.query_params)
    check = validate_params(params, ["org_id"])
    if not check.is_valid:
        return _missing_params_response(check.missing_fields)

    range_ = params.get("range", "30d")
    key = generate_cache_key(
        CACHE_KEYS.DASHBOARD_STATS, {"org_id": params["org_id"], "range": range_}
    )
    envelope = await fetcher.with_cache(
        key,
        lambda: load_dashboard_stats(params["org_id"], range_),
        CacheConfig(ttl_s=TTL.SHORT, stale_while_revalidate_s=TTL.MEDIUM),
    )
    return envelope_to_response(envelope, headers=get_cors_headers(settings.cors_origin))


@app.post("/dashboard/stats/invalidate")
async def invalidate_dashboard_stats():
    return {"removed": fetcher.invalidate_prefix(CACHE_KEYS.DASHBOARD_STATS)}


def _missing_params_response(missing_fields: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Missing required parameters", "missing_fields": missing_fields},
        headers=get_cors_headers(settings.cors_origin),
    )
