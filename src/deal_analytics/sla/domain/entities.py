"""
SLA Domain Entities
====================

Pure Python domain entities for deal SLA measurement.

Deals and stage-change events are immutable snapshots handed over by the
retrieval layer; metrics and summaries are derived on every call and carry
no lifecycle of their own.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from deal_analytics.config import METRIC_TITLES, VALID_METRIC_KEYS
from deal_analytics.sla.domain.value_objects import round_half_up


@dataclass(frozen=True)
class Deal:
    """
    A pipeline record in canonical shape.

    Custom attributes hold raw option identifiers (translated later through
    lookup maps); an empty string means the attribute is absent.
    """

    id: str
    created_at: Optional[datetime]
    stage_id: str = ""
    category_id: str = ""
    source_id: str = ""
    department: str = ""
    rejection_reason: str = ""
    comment_classification: str = ""
    country: str = ""


@dataclass(frozen=True)
class StageChangeEvent:
    """
    One movement of a deal into a stage.

    ``occurred_at`` is None when the raw timestamp did not parse; such an
    event keeps its place in the ordered history but never serves as a
    duration endpoint.
    """

    owner_id: str
    stage_id: str
    occurred_at: Optional[datetime]
    raw_time: str = ""


@dataclass(frozen=True)
class SlaMetric:
    """On-time / applicable counts for one SLA metric."""

    key: str
    title: str
    on_time_count: int
    total_count: int
    rate: float

    def __post_init__(self):
        if not 0 <= self.on_time_count <= self.total_count:
            raise ValueError("on_time_count must be between 0 and total_count")

    @classmethod
    def from_counts(cls, key: str, on_time_count: int, total_count: int) -> "SlaMetric":
        """Build a metric, deriving the rate (one decimal place, 0 when empty)."""
        rate = round_half_up(on_time_count / total_count * 100, 1) if total_count > 0 else 0.0
        return cls(
            key=key,
            title=METRIC_TITLES[key],
            on_time_count=on_time_count,
            total_count=total_count,
            rate=rate,
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "on_time_count": self.on_time_count,
            "total_count": self.total_count,
            "rate": self.rate,
        }


@dataclass(frozen=True)
class SlaSummary:
    """The three SLA metrics, always all present."""

    first_communication: SlaMetric
    follow_up: SlaMetric
    price_sharing: SlaMetric

    @classmethod
    def empty(cls) -> "SlaSummary":
        """All-zero summary used when nothing could be computed."""
        return cls.from_counts({key: (0, 0) for key in VALID_METRIC_KEYS})

    @classmethod
    def from_counts(cls, counts: Dict[str, Tuple[int, int]]) -> "SlaSummary":
        """Build from ``{metric_key: (on_time, total)}``."""
        return cls(**{
            key: SlaMetric.from_counts(key, *counts.get(key, (0, 0)))
            for key in VALID_METRIC_KEYS
        })

    @property
    def metrics(self) -> List[SlaMetric]:
        return [self.first_communication, self.follow_up, self.price_sharing]

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {metric.key: metric.to_dict() for metric in self.metrics}


@dataclass(frozen=True)
class DealTrace:
    """
    Intermediate values behind one deal's verdict for one metric.

    Diagnostic only; used to verify counts against the CRM by hand.
    """

    metric: str
    deal_id: str
    entered_at: datetime
    exited_at: datetime
    elapsed_hours: float
    on_time: bool
    still_open: bool = False


@dataclass(frozen=True)
class SLAComputation:
    """
    Result of one calculator pass: the summary plus optional traces.

    ``degraded`` marks a zero summary substituted after a failure.
    """

    summary: SlaSummary
    traces: Tuple[DealTrace, ...] = field(default_factory=tuple)
    degraded: bool = False
