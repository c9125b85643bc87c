from __future__ import annotations

from fastapi import APIRouter

from fastfood.core.metrics import request_metrics

router = APIRouter(prefix="/internal/metrics", tags=["internal-metrics"])


@router.get("")
def metrics_snapshot():
    return {
        "endpoints": request_metrics.snapshot(),
        "events": request_metrics.snapshot_events(),
    }
