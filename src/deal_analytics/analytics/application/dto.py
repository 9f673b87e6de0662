"""
Analytics Application DTOs
==========================

Data Transfer Objects for the dashboard analytics API layer.

Pydantic models for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from deal_analytics.analytics.domain import DashboardLookups, GroupRow, KpiStats
from deal_analytics.sla.application.dto import SlaSummaryResponse


# ========== Request DTOs ==========

class DashboardRequest(BaseModel):
    """Deal snapshot plus the label maps needed to render the dashboard."""
    deals: List[Any] = Field(default_factory=list, description="Deal records (crm.deal.list shape)")
    stage_history: List[Any] = Field(
        default_factory=list,
        description="Stage-change records (crm.stagehistory.list shape)"
    )
    stage_name_map: Dict[str, str] = Field(default_factory=dict, description="Stage ID -> display name")
    stage_ids_in_order: List[str] = Field(
        default_factory=list,
        description="Pipeline stage order used to seed stage rows"
    )
    department_map: Dict[str, str] = Field(default_factory=dict)
    rejection_reason_map: Dict[str, str] = Field(default_factory=dict)
    comment_map: Dict[str, str] = Field(default_factory=dict)
    source_map: Dict[str, str] = Field(default_factory=dict)
    country_map: Dict[str, str] = Field(default_factory=dict)
    current_time: Optional[datetime] = Field(
        None,
        description="Evaluation instant for deals still in a phase (defaults to now)"
    )

    def to_lookups(self) -> DashboardLookups:
        """Convert label maps to the domain lookup bundle."""
        return DashboardLookups(
            stage_names=self.stage_name_map,
            stage_ids_in_order=self.stage_ids_in_order,
            departments=self.department_map,
            rejection_reasons=self.rejection_reason_map,
            comments=self.comment_map,
            sources=self.source_map,
            countries=self.country_map,
        )


# ========== Response DTOs ==========

class GroupRowResponse(BaseModel):
    """One bucket of a grouped dimension."""
    key: str
    label: str
    count: int = Field(..., ge=0)
    percentage: float
    is_rejection: bool = False

    @classmethod
    def from_domain(cls, row: GroupRow) -> "GroupRowResponse":
        return cls(**row.to_dict())


class KpiResponse(BaseModel):
    """Dashboard header figures."""
    total_requests: int
    total_rejections: int
    rejection_rate: float
    avg_delay_hours: float

    @classmethod
    def from_domain(cls, kpi: KpiStats) -> "KpiResponse":
        return cls(
            total_requests=kpi.total_requests,
            total_rejections=kpi.total_rejections,
            rejection_rate=kpi.rejection_rate,
            avg_delay_hours=kpi.avg_delay_hours,
        )


class DashboardResponse(BaseModel):
    """Full dashboard payload."""
    kpi: KpiResponse
    stage_groups: List[GroupRowResponse]
    department_groups: List[GroupRowResponse]
    rejection_reasons: List[GroupRowResponse]
    comment_rows: List[GroupRowResponse]
    source_groups: List[GroupRowResponse]
    country_groups: List[GroupRowResponse]
    sla_metrics: SlaSummaryResponse
    total: int = Field(..., description="Number of deals in the snapshot")
    stage_history_count: int = Field(..., description="Number of stage-change records received")
