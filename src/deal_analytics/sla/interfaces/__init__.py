"""
SLA Interfaces Layer
====================

Interface adapters (controllers) for the deal SLA module.

Contains:
- Controllers: FastAPI route handlers

This is the outermost layer - handles HTTP requests/responses and
delegates to application services.
"""

from deal_analytics.sla.interfaces.controllers import sla_router, get_sla_service

__all__ = ["sla_router", "get_sla_service"]
