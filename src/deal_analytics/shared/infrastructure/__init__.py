"""
Infrastructure Layer
=====================

Low-level technical concerns shared by all modules:
- Structured JSON logging
- Correlation-aware loggers
- Latency logging
"""
