"""
SLA Infrastructure Layer
=========================

Infrastructure implementations for the deal SLA module:
- Config provider: YAML-backed phase and threshold configuration
"""

from deal_analytics.sla.infrastructure.config_provider import (
    YAMLConfigProvider,
    get_config_provider,
)

__all__ = [
    "YAMLConfigProvider",
    "get_config_provider",
]
