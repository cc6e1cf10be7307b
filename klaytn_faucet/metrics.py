from __future__ import annotations

"""
Prometheus metrics for the Klaytn faucet and a /metrics exporter.

- faucet_issuances_total{outcome}           : "ok" or the FaucetError code
- faucet_issue_critical_seconds             : nonce fetch → submit, lock held
- faucet_issue_waiting                      : requests queued on the signer lock
"""

from fastapi import APIRouter, FastAPI
from prometheus_client import (CONTENT_TYPE_LATEST, REGISTRY, Counter, Gauge,
                               Histogram, generate_latest)
from starlette.responses import Response

ISSUANCES = Counter(
    "faucet_issuances_total",
    "Faucet grant attempts by outcome.",
    ["outcome"],
)

CRITICAL_SECTION_SECONDS = Histogram(
    "faucet_issue_critical_seconds",
    "Time spent holding the signer lock (nonce fetch through submission).",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

WAITING = Gauge(
    "faucet_issue_waiting",
    "Grant requests waiting for the signer lock.",
)


def setup_metrics(app: FastAPI, *, path: str = "/metrics") -> None:
    router = APIRouter(tags=["metrics"])

    @router.get(path, include_in_schema=False)
    def metrics() -> Response:
        return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)

    app.include_router(router)


__all__ = ["ISSUANCES", "CRITICAL_SECTION_SECONDS", "WAITING", "setup_metrics"]
