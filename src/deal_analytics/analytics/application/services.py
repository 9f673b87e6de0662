"""
Analytics Application Services
===============================

Application service for the deal dashboard.

Combines grouped analytics with the SLA summary for one snapshot.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from deal_analytics.analytics.domain import (
    DashboardAnalytics, DashboardLookups, compute_dashboard,
)
from deal_analytics.config import Settings, settings as default_settings
from deal_analytics.shared.infrastructure.logging import get_logger, log_latency
from deal_analytics.sla.application.services import SLAService
from deal_analytics.sla.domain import DealFieldMap, SLAComputation, normalize_deals

logger = get_logger(__name__)


def field_map_from_settings(app_settings: Settings) -> DealFieldMap:
    """Custom deal field names as configured in the environment."""
    return DealFieldMap(
        department=app_settings.department_field,
        rejection_reason=tuple(app_settings.rejection_reason_fields),
        comment_classification=app_settings.comment_field,
        country=app_settings.country_field,
    )


@dataclass(frozen=True)
class DashboardReport:
    """Grouped analytics and SLA summary for one snapshot."""
    analytics: DashboardAnalytics
    sla: SLAComputation
    total: int
    stage_history_count: int


class AnalyticsService:
    """
    Service building the dashboard for a deal snapshot.

    SLA figures go through the guarded path: a failing SLA computation
    degrades to zeros and never blocks the rest of the dashboard.
    """

    def __init__(self, sla_service: SLAService, app_settings: Optional[Settings] = None):
        self._sla_service = sla_service
        self._settings = app_settings or default_settings
        self._fields = field_map_from_settings(self._settings)

    def build_dashboard(
        self,
        deals: Any,
        stage_history: Any,
        lookups: Optional[DashboardLookups] = None,
        *,
        current_time: Optional[datetime] = None,
    ) -> DashboardReport:
        """
        Build the dashboard report.

        Raises:
            InvalidInputException: deals is not a list
        """
        lookups = lookups or DashboardLookups()
        normalized = normalize_deals(deals, self._fields)

        with log_latency(logger, "dashboard_analytics", deals=len(normalized)):
            analytics = compute_dashboard(
                normalized,
                lookups,
                precision=self._settings.percentage_precision,
                rejection_rate_precision=self._settings.rejection_rate_precision,
                avg_delay_hours=self._settings.avg_delay_placeholder_hours,
            )

        stage_name_map: Mapping[str, str] = lookups.stage_names
        sla = self._sla_service.calculate_summary_safe(
            normalized,
            stage_history,
            stage_name_map,
            current_time=current_time,
        )

        history_count = len(stage_history) if isinstance(stage_history, (list, tuple)) else 0
        logger.info(
            "Dashboard built",
            extra={
                "deals": len(normalized),
                "stage_history": history_count,
                "rejections": analytics.kpi.total_rejections,
                "sla_degraded": sla.degraded,
            }
        )
        return DashboardReport(
            analytics=analytics,
            sla=sla,
            total=len(normalized),
            stage_history_count=history_count,
        )
