"""
Deal Analytics Module
=====================

Bounded Context for the grouped deal dashboard.

Responsibilities:
- Count deals per stage, department, rejection reason, comment
  classification, source and country
- Flag rejection stages and derive the KPI header
- Attach the guarded SLA summary to the dashboard payload
"""

__version__ = "1.0.0"
