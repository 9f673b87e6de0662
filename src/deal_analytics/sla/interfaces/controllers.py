"""
SLA Controllers (API Routes)
=============================

FastAPI routes for deal SLA metrics.

Controllers are thin - they delegate to application services.
"""

import time

from fastapi import APIRouter, Depends, Query, Request

from deal_analytics.sla.application import (
    ISLAConfigProvider,
    SLAService,
    SlaMetricsRequest,
    SlaSummaryResponse,
)
from deal_analytics.sla.infrastructure import get_config_provider
from deal_analytics.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/sla", tags=["Deal SLA"])


# ========== Example payloads for Swagger ==========

SLA_METRICS_REQUEST_EXAMPLE = {
    "deals": [
        {"ID": "101", "DATE_CREATE": "2024-01-01T10:00:00Z", "STAGE_ID": "C1:UC_FOLLOW"}
    ],
    "stage_history": [
        {"OWNER_ID": "101", "STAGE_ID": "C1:NEW", "CREATED_TIME": "2024-01-01T10:00:00Z"},
        {"OWNER_ID": "101", "STAGE_ID": "C1:UC_FOLLOW", "CREATED_TIME": "2024-01-01T10:30:00Z"}
    ],
    "stage_name_map": {
        "C1:NEW": "New Lead",
        "C1:UC_FOLLOW": "Follow up in 24 Hours"
    }
}

SLA_SUMMARY_RESPONSE_EXAMPLE = {
    "first_communication": {
        "title": "First Communication on Time",
        "on_time_count": 1,
        "total_count": 1,
        "rate": 100.0
    },
    "follow_up": {
        "title": "Follow-up on Time",
        "on_time_count": 1,
        "total_count": 1,
        "rate": 100.0
    },
    "price_sharing": {
        "title": "Price sharing to Patient on Time",
        "on_time_count": 0,
        "total_count": 0,
        "rate": 0.0
    },
    "degraded": False,
    "traces": []
}


# ========== Dependencies ==========

def get_sla_service(
    config_provider: ISLAConfigProvider = Depends(get_config_provider)
) -> SLAService:
    """Get SLA service instance."""
    return SLAService(config_provider)


# ========== Route Handlers ==========

@router.post(
    "/metrics",
    response_model=SlaSummaryResponse,
    summary="Compute deal SLA metrics",
    description="""
    Compute the three SLA metrics for a deal snapshot:
    - **First Communication**: creation to first move out of the initial stage (1h)
    - **Follow-up**: time spent in the follow-up stage (24h)
    - **Price Sharing**: time spent in the offer finalization stage (24h)

    Stages are matched to phases by display-name fragment, so the
    `stage_name_map` must be supplied. Deals without usable timestamps are
    left out of the denominators.

    A failing computation returns all-zero metrics with `degraded: true`
    instead of an error.

    Set `include_trace=true` to get the per-deal entry/exit times behind
    each verdict.
    """,
    responses={
        200: {
            "description": "SLA metrics",
            "content": {
                "application/json": {
                    "example": SLA_SUMMARY_RESPONSE_EXAMPLE
                }
            }
        }
    }
)
def compute_sla_metrics(
    request: Request,
    payload: SlaMetricsRequest,
    include_trace: bool = Query(False, description="Include per-deal diagnostic traces"),
    service: SLAService = Depends(get_sla_service)
):
    start_time = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    computation = service.calculate_summary_safe(
        payload.deals,
        payload.stage_history,
        payload.stage_name_map,
        current_time=payload.current_time,
        collect_trace=include_trace,
    )

    logger.info(
        "SLA metrics computed",
        extra={
            "correlation_id": correlation_id,
            "deals": len(payload.deals),
            "stage_history": len(payload.stage_history),
            "degraded": computation.degraded,
            "processing_time_ms": int((time.perf_counter() - start_time) * 1000)
        }
    )

    return SlaSummaryResponse.from_domain(computation)


# Export router for inclusion in main app
sla_router = router
