"""
Prometheus metrics for HoopForecast.

Metrics exposed:
- Upstream adapter success/failure counters
- Comparison outcome counter (recommendation or fatal error kind)
- The Odds API quota gauges

HTTP request metrics are added by prometheus-fastapi-instrumentator in
``hoopforecast.main``.
"""
from typing import Optional

from prometheus_client import Counter, Gauge

# Upstream Adapter Metrics
upstream_requests_success_total = Counter(
    "upstream_requests_success_total",
    "Total successful upstream requests",
    ["adapter"]
)

upstream_requests_failure_total = Counter(
    "upstream_requests_failure_total",
    "Total failed upstream requests",
    ["adapter", "error_type"]
)

# Comparison Metrics
comparisons_total = Counter(
    "comparisons_total",
    "Total comparisons by outcome (recommendation or error kind)",
    ["outcome"]
)

# API Quota Metrics
odds_api_quota_remaining = Gauge(
    "odds_api_quota_remaining",
    "Remaining Odds API requests for current billing period"
)

odds_api_quota_used = Gauge(
    "odds_api_quota_used",
    "Used Odds API requests in current billing period"
)


def record_upstream_success(adapter: str) -> None:
    upstream_requests_success_total.labels(adapter=adapter).inc()


def record_upstream_failure(adapter: str, error_type: str) -> None:
    upstream_requests_failure_total.labels(adapter=adapter, error_type=error_type).inc()


def record_comparison(outcome: str) -> None:
    comparisons_total.labels(outcome=outcome).inc()


def update_odds_api_quota(remaining: Optional[int], used: Optional[int]) -> None:
    """Update quota gauges from The Odds API response headers."""
    if remaining is not None:
        odds_api_quota_remaining.set(remaining)
    if used is not None:
        odds_api_quota_used.set(used)
