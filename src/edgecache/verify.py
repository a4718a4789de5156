"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Deployment check that endpoints return the expected cache headers.

Usage examples:
  edgecache-verify --base-url https://app.example.com
  VERIFY_URL=https://app.example.com python -m edgecache.verify --json
"""

from __future__ import annotations

import argparse
import http.client
import json
import logging
import os
import sys
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Mapping, Sequence
from dataclasses import asdict, dataclass, field

logger = logging.getLogger("edgecache.verify")

HeaderFetcher = Callable[[str], Mapping[str, str]]

DEFAULT_PATHS: dict[str, tuple[str, ...]] = {
    "static": (
        "/assets/main.js",
        "/assets/main.css",
        "/assets/logo.svg",
        "/fonts/inter.woff2",
    ),
    "api": (
        "/api/dashboard/stats",
        "/api/customers/list",
        "/api/leads/summary",
    ),
    "html": (
        "/",
        "/dashboard",
        "/customers",
    ),
}

EXPECTED_HEADERS: dict[str, dict[str, str]] = {
    "static": {"Cache-Control": "public, max-age=31536000, immutable"},
    "api": {"Cache-Control": "public, max-age=60, stale-while-revalidate=300"},
    "html": {"Cache-Control": "public, max-age=0, must-revalidate"},
}


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Header check outcome for one path."""

    path: str
    passed: bool
    issues: list[str] = field(default_factory=list)


@dataclass(slots=True)
class VerificationReport:
    """Per-category results with a pass/fail summary."""

    results: dict[str, list[VerificationResult]] = field(default_factory=dict)
    total: int = 0
    passed: int = 0
    failed: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def add(self, category: str, result: VerificationResult) -> None:
        self.results.setdefault(category, []).append(result)
        self.total += 1
        if result.passed:
            self.passed += 1
        else:
            self.failed += 1

    def to_dict(self) -> dict[str, object]:
        return {
            "results": {
                category: [asdict(item) for item in items]
                for category, items in self.results.items()
            },
            "summary": {"total": self.total, "passed": self.passed, "failed": self.failed},
        }


def fetch_headers(url: str, *, timeout_s: float = 10.0) -> dict[str, str]:
    """GET `url` and return its response headers, lower-cased."""
    req = urllib.request.Request(url, method="GET")
    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:  # noqa: S310
            return {name.lower(): value for name, value in resp.headers.items()}
    except urllib.error.HTTPError as e:
        # Error statuses still carry headers worth checking.
        return {name.lower(): value for name, value in e.headers.items()}


def verify_headers(
    actual: Mapping[str, str],
    expected: Mapping[str, str],
    path: str,
) -> VerificationResult:
    """Compare `actual` headers (matched case-insensitively) with `expected`."""
    lowered = {name.lower(): value for name, value in actual.items()}
    issues: list[str] = []
    for header, expected_value in expected.items():
        actual_value = lowered.get(header.lower())
        if not actual_value:
            issues.append(f"Missing header: {header}")
        elif actual_value != expected_value:
            issues.append(
                f'Invalid {header}: expected "{expected_value}", got "{actual_value}"'
            )
    return VerificationResult(path=path, passed=not issues, issues=issues)


def verify_all(
    base_url: str,
    *,
    paths: Mapping[str, Sequence[str]] | None = None,
    expected: Mapping[str, Mapping[str, str]] | None = None,
    fetch: HeaderFetcher | None = None,
) -> VerificationReport:
    """Check every configured path under `base_url`."""
    paths = paths if paths is not None else DEFAULT_PATHS
    expected = expected if expected is not None else EXPECTED_HEADERS
    fetch = fetch or fetch_headers

    report = VerificationReport()
    for category, category_paths in paths.items():
        wanted = expected.get(category, {})
        for path in category_paths:
            url = urllib.parse.urljoin(base_url, path)
            try:
                headers = fetch(url)
            except (OSError, ValueError, http.client.HTTPException) as exc:
                logger.warning("Header check request failed for %s: %s", url, exc)
                result = VerificationResult(
                    path=path, passed=False, issues=[f"Request failed: {exc}"]
                )
            else:
                result = verify_headers(headers, wanted, path)
            report.add(category, result)
    return report


def format_report(report: VerificationReport) -> str:
    lines: list[str] = []
    for category, items in report.results.items():
        lines.append(f"Testing {category} paths...")
        for item in items:
            mark = "PASS" if item.passed else "FAIL"
            lines.append(f"  [{mark}] {item.path}")
            lines.extend(f"      - {issue}" for issue in item.issues)
    lines.append(
        f"Summary: {report.passed}/{report.total} passed, {report.failed} failed"
    )
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="edgecache-verify",
        description="Verify deployed endpoints return the expected Cache-Control headers.",
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("VERIFY_URL"),
        help="Deployment base URL (defaults to $VERIFY_URL).",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    parser.add_argument("--timeout-s", type=float, default=10.0)
    args = parser.parse_args(argv)

    if not args.base_url:
        parser.error("--base-url or VERIFY_URL is required")

    report = verify_all(
        args.base_url,
        fetch=lambda url: fetch_headers(url, timeout_s=args.timeout_s),
    )
    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(format_report(report))
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
