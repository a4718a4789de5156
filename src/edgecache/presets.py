"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Named TTL presets and well-known cache-key prefixes.

Consumers that expect cache hits across calls must reuse these exact
constants when building keys.
"""

from __future__ import annotations

from typing import Final


class TTL:
    """TTL presets in seconds."""

    SHORT: Final[int] = 60
    MEDIUM: Final[int] = 300
    LONG: Final[int] = 3600
    VERY_LONG: Final[int] = 86400


class CACHE_KEYS:
    """Cache-key prefixes for dashboards and reports."""

    DASHBOARD_STATS: Final[str] = "dashboardStats"
    LEAD_METRICS: Final[str] = "leadMetrics"
    ESTIMATE_METRICS: Final[str] = "estimateMetrics"
    MONTHLY_REVENUE: Final[str] = "monthlyRevenue"
    ACTIVITY_LOGS: Final[str] = "activityLogs"
    CUSTOMER_LIST: Final[str] = "customerList"
    USER_PERMISSIONS: Final[str] = "userPermissions"
