"""
Analytics Domain Entities
=========================

Derived aggregates for the deal dashboard. All of them are rebuilt on
every request from the deal snapshot; none is stored.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional


@dataclass(frozen=True)
class GroupRow:
    """
    One bucket of a grouped dimension.

    ``key`` is the raw identifier behind the bucket ("" for the blank
    bucket); ``label`` is what gets displayed.
    """
    key: str
    label: str
    count: int
    percentage: float
    is_rejection: bool = False

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "count": self.count,
            "percentage": self.percentage,
            "is_rejection": self.is_rejection,
        }


@dataclass(frozen=True)
class KpiStats:
    """Top-line figures for the dashboard header."""
    total_requests: int
    total_rejections: int
    rejection_rate: float
    avg_delay_hours: float


@dataclass(frozen=True)
class DashboardLookups:
    """
    Identifier -> label maps for each grouped attribute.

    Any of them may be missing or incomplete; labels then fall back to the
    raw identifier.
    """
    stage_names: Mapping[str, str] = field(default_factory=dict)
    stage_ids_in_order: List[str] = field(default_factory=list)
    departments: Mapping[str, str] = field(default_factory=dict)
    rejection_reasons: Mapping[str, str] = field(default_factory=dict)
    comments: Mapping[str, str] = field(default_factory=dict)
    sources: Mapping[str, str] = field(default_factory=dict)
    countries: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DashboardAnalytics:
    """All grouped analytics for one deal snapshot."""
    kpi: KpiStats
    stage_groups: List[GroupRow]
    department_groups: List[GroupRow]
    rejection_reasons: List[GroupRow]
    comment_rows: List[GroupRow]
    source_groups: List[GroupRow]
    country_groups: List[GroupRow]

    def dimensions(self) -> dict:
        """Row collections keyed by dimension name."""
        return {
            "stage": self.stage_groups,
            "department": self.department_groups,
            "rejection_reason": self.rejection_reasons,
            "comment": self.comment_rows,
            "source": self.source_groups,
            "country": self.country_groups,
        }


def empty_lookups(lookups: Optional[DashboardLookups]) -> DashboardLookups:
    return lookups if lookups is not None else DashboardLookups()
