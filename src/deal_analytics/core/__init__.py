"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from deal_analytics.core.exceptions import (
    ApplicationException,
    ValidationException,
    InvalidInputException,
    ConfigurationException,
)

__all__ = [
    "ApplicationException",
    "ValidationException",
    "InvalidInputException",
    "ConfigurationException",
]
