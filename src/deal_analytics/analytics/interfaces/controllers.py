"""
Analytics Controllers (API Routes)
===================================

FastAPI routes for the deal dashboard.

Controllers delegate to application services.
"""

import time

from fastapi import APIRouter, Depends, Request

from deal_analytics.analytics.application import (
    AnalyticsService,
    DashboardRequest,
    DashboardResponse,
    GroupRowResponse,
    KpiResponse,
)
from deal_analytics.sla.application import SlaSummaryResponse, SLAService
from deal_analytics.sla.interfaces import get_sla_service
from deal_analytics.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/analytics", tags=["Deal Analytics"])


# ========== Example payloads for Swagger ==========

DASHBOARD_REQUEST_EXAMPLE = {
    "deals": [
        {"ID": "101", "STAGE_ID": "C1:NEW", "SOURCE_ID": "WEB", "UF_CRM_1758023694929": "45"},
        {"ID": "102", "STAGE_ID": "C1:LOSE", "SOURCE_ID": "CALL"}
    ],
    "stage_history": [],
    "stage_name_map": {"C1:NEW": "New Lead", "C1:LOSE": "Deal lost"},
    "stage_ids_in_order": ["C1:NEW", "C1:UC_FOLLOW", "C1:LOSE"],
    "department_map": {"45": "Cardiology"},
    "source_map": {"WEB": "Website", "CALL": "Phone call"}
}

DASHBOARD_RESPONSE_EXAMPLE = {
    "kpi": {
        "total_requests": 2,
        "total_rejections": 1,
        "rejection_rate": 50.0,
        "avg_delay_hours": 1.0
    },
    "stage_groups": [
        {"key": "C1:NEW", "label": "New Lead", "count": 1, "percentage": 50.0, "is_rejection": False},
        {"key": "C1:UC_FOLLOW", "label": "UC FOLLOW", "count": 0, "percentage": 0.0, "is_rejection": False},
        {"key": "C1:LOSE", "label": "Deal lost", "count": 1, "percentage": 50.0, "is_rejection": True}
    ],
    "department_groups": [
        {"key": "45", "label": "Cardiology", "count": 1, "percentage": 50.0, "is_rejection": False},
        {"key": "", "label": "Unassigned", "count": 1, "percentage": 50.0, "is_rejection": False}
    ],
    "total": 2,
    "stage_history_count": 0
}


# ========== Dependencies ==========

def get_analytics_service(
    sla_service: SLAService = Depends(get_sla_service)
) -> AnalyticsService:
    """Get analytics service instance."""
    return AnalyticsService(sla_service)


# ========== Route Handlers ==========

@router.post(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Build the deal dashboard",
    description="""
    Group a deal snapshot for the dashboard and attach the SLA metrics.

    **Dimensions**: stage, department, rejection reason, comment
    classification, source, country. Every deal is counted once per
    dimension; deals without a value land in a blank bucket
    (`Unknown`, `Unassigned` or `(Blank)`).

    **Stage rows** follow `stage_ids_in_order` when supplied, with zero
    rows for empty stages. Stages matching LOSE/LOST/REJECT/FAIL are
    flagged as rejections and counted in the KPI.

    SLA metrics degrade to zeros on failure; the rest of the dashboard is
    still returned.
    """,
    responses={
        200: {
            "description": "Dashboard analytics",
            "content": {
                "application/json": {
                    "example": DASHBOARD_RESPONSE_EXAMPLE
                }
            }
        }
    }
)
def build_dashboard(
    request: Request,
    payload: DashboardRequest,
    service: AnalyticsService = Depends(get_analytics_service)
):
    start_time = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    report = service.build_dashboard(
        payload.deals,
        payload.stage_history,
        payload.to_lookups(),
        current_time=payload.current_time,
    )
    analytics = report.analytics

    logger.info(
        "Dashboard served",
        extra={
            "correlation_id": correlation_id,
            "deals": report.total,
            "processing_time_ms": int((time.perf_counter() - start_time) * 1000)
        }
    )

    def rows(items):
        return [GroupRowResponse.from_domain(row) for row in items]

    return DashboardResponse(
        kpi=KpiResponse.from_domain(analytics.kpi),
        stage_groups=rows(analytics.stage_groups),
        department_groups=rows(analytics.department_groups),
        rejection_reasons=rows(analytics.rejection_reasons),
        comment_rows=rows(analytics.comment_rows),
        source_groups=rows(analytics.source_groups),
        country_groups=rows(analytics.country_groups),
        sla_metrics=SlaSummaryResponse.from_domain(report.sla),
        total=report.total,
        stage_history_count=report.stage_history_count,
    )


# Export router for inclusion in main app
analytics_router = router
