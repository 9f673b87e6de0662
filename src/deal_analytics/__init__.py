"""
Deal SLA Analytics
==================

SLA metrics and grouped dashboard analytics for CRM deal pipelines.
"""

__version__ = "1.0.0"
