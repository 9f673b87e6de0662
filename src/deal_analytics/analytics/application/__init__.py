"""
Analytics Application Layer
===========================

Application layer for the dashboard analytics module.

Contains:
- Services: Dashboard orchestration
- DTOs: Data transfer objects for API serialization
"""

from deal_analytics.analytics.application.dto import (
    DashboardRequest,
    GroupRowResponse,
    KpiResponse,
    DashboardResponse,
)
from deal_analytics.analytics.application.services import (
    AnalyticsService,
    DashboardReport,
    field_map_from_settings,
)

__all__ = [
    # DTOs
    "DashboardRequest",
    "GroupRowResponse",
    "KpiResponse",
    "DashboardResponse",
    # Services
    "AnalyticsService",
    "DashboardReport",
    "field_map_from_settings",
]
