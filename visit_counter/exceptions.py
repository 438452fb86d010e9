"""
Custom exception classes for the visit counter service.

Most failures in this service are recovered locally (see CounterStore), so
these types mainly give the recovery paths something specific to catch.
"""

from typing import Optional


class VisitCounterException(Exception):
    """Base exception for all visit counter errors."""
    pass


class PersistenceError(VisitCounterException):
    """Raised when a counter or badge snapshot cannot be written to disk.

    Attributes:
        path: File that could not be written
        operation: Operation that failed (e.g., 'serialize', 'write', 'replace')
        original_error: The underlying exception that caused this error
    """

    def __init__(self, message: str, path: Optional[str] = None, operation: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        super().__init__(message)
        self.path = path
        self.operation = operation
        self.original_error = original_error


class ConfigError(VisitCounterException):
    """Raised for configuration values that cannot be used.

    Attributes:
        errors: List of validation messages
    """

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = list(errors or [])
