"""
SLA Domain Layer
================

Domain layer for the deal SLA module.

Contains:
- Entities: Deal, StageChangeEvent and the derived SlaMetric / SlaSummary
- Value Objects: SLAConfig, PhaseDefinition, PhaseMatch
- Domain Services: normalization, history grouping, phase matching and
  the SLAMetricCalculator

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from deal_analytics.sla.domain.entities import (
    Deal,
    StageChangeEvent,
    SlaMetric,
    SlaSummary,
    DealTrace,
    SLAComputation,
)
from deal_analytics.sla.domain.value_objects import (
    SLACalculator,
    round_half_up,
    SLAConfig,
    PhaseDefinition,
)
from deal_analytics.sla.domain.normalization import (
    DealFieldMap,
    normalize_deals,
    normalize_events,
    parse_timestamp,
)
from deal_analytics.sla.domain.history import group_history
from deal_analytics.sla.domain.phases import (
    PhaseMatch,
    match_phase,
    resolve_stage_name,
    is_default_new_stage,
)
from deal_analytics.sla.domain.calculator import SLAMetricCalculator

__all__ = [
    # Entities
    "Deal",
    "StageChangeEvent",
    "SlaMetric",
    "SlaSummary",
    "DealTrace",
    "SLAComputation",
    # Value Objects
    "SLACalculator",
    "round_half_up",
    "SLAConfig",
    "PhaseDefinition",
    "PhaseMatch",
    # Domain Services
    "DealFieldMap",
    "normalize_deals",
    "normalize_events",
    "parse_timestamp",
    "group_history",
    "match_phase",
    "resolve_stage_name",
    "is_default_new_stage",
    "SLAMetricCalculator",
]
