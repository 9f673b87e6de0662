"""
SLA Application DTOs
=====================

Data Transfer Objects for the SLA API layer.

Request bodies carry the snapshot already retrieved from the CRM. Records
stay loosely typed (``Any``) on purpose: record-level shape problems are
handled by the domain normalization step, not rejected at the HTTP edge.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from deal_analytics.sla.domain import DealTrace, SlaMetric, SLAComputation


# ========== Request DTOs ==========

class SlaMetricsRequest(BaseModel):
    """Snapshot needed to compute the SLA summary."""
    deals: List[Any] = Field(default_factory=list, description="Deal records (crm.deal.list shape)")
    stage_history: List[Any] = Field(
        default_factory=list,
        description="Stage-change records (crm.stagehistory.list shape)"
    )
    stage_name_map: Dict[str, str] = Field(
        default_factory=dict,
        description="Stage ID -> display name"
    )
    current_time: Optional[datetime] = Field(
        None,
        description="Evaluation instant for deals still in a phase (defaults to now)"
    )


# ========== Response DTOs ==========

class SlaMetricResponse(BaseModel):
    """One SLA metric."""
    title: str
    on_time_count: int = Field(..., ge=0)
    total_count: int = Field(..., ge=0)
    rate: float = Field(..., description="On-time percentage, one decimal place")

    @classmethod
    def from_domain(cls, metric: SlaMetric) -> "SlaMetricResponse":
        return cls(**metric.to_dict())


class DealTraceResponse(BaseModel):
    """Per-deal intermediate values (diagnostic)."""
    metric: str
    deal_id: str
    entered_at: datetime
    exited_at: datetime
    elapsed_hours: float
    on_time: bool
    still_open: bool

    @classmethod
    def from_domain(cls, trace: DealTrace) -> "DealTraceResponse":
        return cls(
            metric=trace.metric,
            deal_id=trace.deal_id,
            entered_at=trace.entered_at,
            exited_at=trace.exited_at,
            elapsed_hours=trace.elapsed_hours,
            on_time=trace.on_time,
            still_open=trace.still_open,
        )


class SlaSummaryResponse(BaseModel):
    """The three SLA metrics, always present."""
    first_communication: SlaMetricResponse
    follow_up: SlaMetricResponse
    price_sharing: SlaMetricResponse
    degraded: bool = Field(False, description="True when zeros were substituted after a failure")
    traces: List[DealTraceResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, computation: SLAComputation) -> "SlaSummaryResponse":
        summary = computation.summary
        return cls(
            first_communication=SlaMetricResponse.from_domain(summary.first_communication),
            follow_up=SlaMetricResponse.from_domain(summary.follow_up),
            price_sharing=SlaMetricResponse.from_domain(summary.price_sharing),
            degraded=computation.degraded,
            traces=[DealTraceResponse.from_domain(t) for t in computation.traces],
        )
