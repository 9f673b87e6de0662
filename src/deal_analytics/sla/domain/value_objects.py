"""
SLA Value Objects
==================

Immutable value objects for the SLA domain.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared between concurrent requests.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from deal_analytics.config import (
    InitialResponsePolicy,
    DEFAULT_PHASE_FRAGMENTS, DEFAULT_THRESHOLD_HOURS,
    VALID_INITIAL_RESPONSE_POLICIES,
)


def round_half_up(value: float, places: int = 0) -> float:
    """Round with halves away from zero (6.25 -> 6.3), as dashboards display it."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class SLACalculator:
    """
    Pure functions for SLA calculations.

    Stateless utility class - all duration arithmetic in one place.
    """

    @staticmethod
    def elapsed_hours(start: datetime, end: datetime) -> float:
        """Hours between two instants (negative if end precedes start)."""
        return (end - start).total_seconds() / 3600

    @staticmethod
    def is_on_time(elapsed_hours: float, threshold_hours: float) -> bool:
        """A deal is on time when it used at most the full threshold."""
        return elapsed_hours <= threshold_hours


class PhaseDefinition(BaseModel):
    """How one conceptual phase is recognised."""
    fragment: Optional[str] = Field(
        default=None,
        description="Case-insensitive fragment of the stage display name"
    )
    stage_ids: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Explicit stage IDs per pipeline; overrides name matching"
    )

    def explicit_stage_ids(self) -> List[str]:
        """All configured stage IDs across pipelines."""
        return [stage_id for ids in self.stage_ids.values() for stage_id in ids]


class SLAConfig(BaseModel):
    """
    SLA configuration loaded from YAML.

    Missing phases, thresholds and policy fall back to the built-in
    defaults, so an empty file (or no file) is a valid configuration.
    """
    phases: Dict[str, PhaseDefinition] = Field(
        default_factory=dict,
        validate_default=True,
        description="Phase definitions keyed by phase"
    )
    thresholds_hours: Dict[str, float] = Field(
        default_factory=dict,
        validate_default=True,
        description="On-time threshold in hours keyed by metric"
    )
    initial_response_policy: str = Field(
        default=InitialResponsePolicy.EXCLUDE,
        description="Treatment of deals that never left the initial phase"
    )

    @field_validator("phases")
    @classmethod
    def validate_phases(cls, v: Dict[str, PhaseDefinition]) -> Dict[str, PhaseDefinition]:
        """Fill in phases and fragments that were not configured."""
        phases = dict(v)
        for key, fragment in DEFAULT_PHASE_FRAGMENTS.items():
            phase = phases.get(key) or PhaseDefinition()
            if phase.fragment is None:
                phase = phase.model_copy(update={"fragment": fragment})
            phases[key] = phase
        return phases

    @field_validator("thresholds_hours")
    @classmethod
    def validate_thresholds(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Reject non-positive thresholds and fill missing ones."""
        for key, hours in v.items():
            if hours <= 0:
                raise ValueError(f"threshold for {key} must be positive, got {hours}")
        return {**DEFAULT_THRESHOLD_HOURS, **v}

    @field_validator("initial_response_policy")
    @classmethod
    def validate_policy(cls, v: str) -> str:
        if v not in VALID_INITIAL_RESPONSE_POLICIES:
            raise ValueError(f"initial_response_policy must be one of {VALID_INITIAL_RESPONSE_POLICIES}")
        return v

    def get_phase(self, key: str) -> PhaseDefinition:
        """Get the definition of a phase (defaults if unknown)."""
        return self.phases.get(key) or PhaseDefinition(fragment=DEFAULT_PHASE_FRAGMENTS.get(key, ""))

    def get_threshold_hours(self, metric_key: str) -> float:
        """Get the on-time threshold for a metric in hours."""
        return self.thresholds_hours.get(metric_key, DEFAULT_THRESHOLD_HOURS[metric_key])

    @property
    def counts_pending_first_communication(self) -> bool:
        return self.initial_response_policy == InitialResponsePolicy.ELAPSED_SINCE_CREATION
