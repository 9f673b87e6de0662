"""
Analytics Domain Layer
======================

Domain layer for the deal dashboard analytics module.

Contains:
- Entities: GroupRow, KpiStats, DashboardLookups, DashboardAnalytics
- Grouping: pure bucket aggregation per dimension

This layer is framework-agnostic and contains pure business logic.
"""

from deal_analytics.analytics.domain.entities import (
    GroupRow,
    KpiStats,
    DashboardLookups,
    DashboardAnalytics,
)
from deal_analytics.analytics.domain.grouping import (
    REJECTION_STAGE_PATTERN,
    is_rejection_stage,
    stage_label,
    percentage,
    group_deals,
    group_by_stage,
    compute_kpi,
    compute_dashboard,
)

__all__ = [
    # Entities
    "GroupRow",
    "KpiStats",
    "DashboardLookups",
    "DashboardAnalytics",
    # Grouping
    "REJECTION_STAGE_PATTERN",
    "is_rejection_stage",
    "stage_label",
    "percentage",
    "group_deals",
    "group_by_stage",
    "compute_kpi",
    "compute_dashboard",
]
