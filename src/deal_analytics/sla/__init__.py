"""
Deal SLA Module
===============

Bounded Context for deal stage SLA metrics.

Responsibilities:
- Normalize CRM deal and stage-history records
- Resolve lifecycle phases from stage display names
- Measure first communication, follow-up and price sharing against
  their hour thresholds
- Load phase and threshold configuration from YAML
"""

__version__ = "1.0.0"
