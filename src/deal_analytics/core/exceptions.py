"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

Only structurally invalid arguments and broken configuration are raised;
malformed individual CRM records are never an error (they are excluded from
the affected computation instead).
"""

from typing import Optional, Any


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class InvalidInputException(ValidationException):
    """Raised when a top-level collection argument has the wrong shape."""

    def __init__(self, argument: str, received: Any, details: Optional[dict] = None):
        self.argument = argument
        self.received_type = type(received).__name__
        super().__init__(
            f"{argument} must be a list, got {self.received_type}",
            details or {"argument": argument, "received_type": self.received_type}
        )


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""

    def __init__(self, message: str, source: Optional[str] = None, details: Optional[dict] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message, details)
