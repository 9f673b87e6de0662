"""
SLA Application Layer
======================

Application layer for the deal SLA module.

Contains:
- Services: Orchestrate domain logic and configuration access
- DTOs: Data transfer objects for API serialization

This layer depends on the domain layer and provider interfaces,
but not on concrete infrastructure implementations.
"""

from deal_analytics.sla.application.dto import (
    SlaMetricsRequest,
    SlaMetricResponse,
    DealTraceResponse,
    SlaSummaryResponse,
)
from deal_analytics.sla.application.services import (
    SLAService,
    ISLAConfigProvider,
    StaticConfigProvider,
)

__all__ = [
    # DTOs
    "SlaMetricsRequest",
    "SlaMetricResponse",
    "DealTraceResponse",
    "SlaSummaryResponse",
    # Services
    "SLAService",
    # Provider Interfaces
    "ISLAConfigProvider",
    "StaticConfigProvider",
]
