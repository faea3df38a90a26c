"""
Gostman Exception Hierarchy

Defines the exceptions raised by the request engine and the persistent store.
Each exception carries a short user-facing label; the message is shown verbatim.
"""

from typing import Any, Dict, Optional


class GostmanException(Exception):
    """Base exception for all Gostman errors."""

    label = "Error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ConfigurationError(GostmanException):
    """Malformed environment, header or param JSON, or an unsupported method."""

    label = "Configuration Error"


class NetworkError(GostmanException):
    """Connection failure, timeout or a fault while reading the response."""

    label = "Network Error"


class NotFoundError(GostmanException):
    """No saved request matches the given id."""

    label = "Not Found"


class ValidationError(GostmanException):
    """A write was rejected because its payload failed validation."""

    label = "Validation Error"


class StorageError(GostmanException):
    """The backing document could not be read or written."""

    label = "Storage Error"
