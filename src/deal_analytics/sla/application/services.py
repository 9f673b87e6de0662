"""
SLA Application Services
=========================

Application services orchestrate domain logic and configuration access.

Following SOLID principles:
- Single Responsibility: Each service has one clear purpose
- Dependency Inversion: Depend on abstractions (config provider), not
  concrete implementations
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Mapping, Optional

from deal_analytics.sla.domain import (
    SLAComputation, SLAConfig, SLAMetricCalculator, SlaSummary,
)
from deal_analytics.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)


# ========== Provider Interfaces (Dependency Inversion) ==========

class ISLAConfigProvider(ABC):
    """Interface for SLA configuration access."""

    @abstractmethod
    def get_config(self) -> SLAConfig:
        """Get current SLA configuration."""


class StaticConfigProvider(ISLAConfigProvider):
    """Provider wrapping an in-memory configuration."""

    def __init__(self, config: Optional[SLAConfig] = None):
        self._config = config or SLAConfig()

    def get_config(self) -> SLAConfig:
        return self._config


# ========== Application Services ==========

class SLAService:
    """
    Service computing the deal SLA summary.

    Stateless between calls: the calculator is rebuilt from the current
    configuration on every request.
    """

    def __init__(self, config_provider: ISLAConfigProvider):
        self._config_provider = config_provider

    def calculate_summary(
        self,
        deals: Any,
        stage_history: Any,
        stage_name_map: Optional[Mapping[str, str]] = None,
        *,
        current_time: Optional[datetime] = None,
        collect_trace: bool = False,
    ) -> SLAComputation:
        """
        Calculate the SLA summary.

        Raises:
            InvalidInputException: deals or stage_history is not a list
        """
        calculator = SLAMetricCalculator(self._config_provider.get_config())
        with log_latency(logger, "sla_summary"):
            return calculator.calculate(
                deals,
                stage_history,
                stage_name_map,
                current_time=current_time,
                collect_trace=collect_trace,
            )

    def calculate_summary_safe(
        self,
        deals: Any,
        stage_history: Any,
        stage_name_map: Optional[Mapping[str, str]] = None,
        *,
        current_time: Optional[datetime] = None,
        collect_trace: bool = False,
    ) -> SLAComputation:
        """
        Calculate the SLA summary, substituting zeros on any failure.

        The analytics surface must always render, so a failure here is
        logged and reported through ``degraded`` instead of propagating.
        """
        try:
            return self.calculate_summary(
                deals,
                stage_history,
                stage_name_map,
                current_time=current_time,
                collect_trace=collect_trace,
            )
        except Exception:
            logger.exception("SLA calculation failed, returning empty summary")
            return SLAComputation(summary=SlaSummary.empty(), degraded=True)
