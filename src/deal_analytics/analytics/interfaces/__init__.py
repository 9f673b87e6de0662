"""
Analytics Interfaces Layer
==========================

Interface adapters (controllers) for the dashboard analytics module.

Contains:
- Controllers: FastAPI route handlers
"""

from deal_analytics.analytics.interfaces.controllers import analytics_router

__all__ = ["analytics_router"]
