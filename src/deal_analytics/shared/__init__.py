"""
Shared Kernel Module
====================

Generic infrastructure used by both bounded contexts (deal SLA and
dashboard analytics): structured logging and HTTP middleware.

DO NOT add SLA or analytics business logic to the shared kernel.
"""

__version__ = "1.0.0"
