"""
Custom Exceptions for ScriptFlow

Hierarchical exception classes for proper error handling across layers.
"""

from typing import Optional, Dict, Any


class ScriptFlowError(Exception):
    """Base exception for all ScriptFlow errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ValidationError(ScriptFlowError):
    """Raised when input validation fails."""
    pass


class DatabaseError(ScriptFlowError):
    """Raised when database operations fail."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(message, details, original_error)


class NotFoundError(DatabaseError):
    """Raised when a requested resource is not found."""
    pass


class DuplicateError(DatabaseError):
    """Raised when attempting to create a duplicate resource."""
    pass


class ConflictError(ScriptFlowError):
    """Raised when an operation does not apply to the resource's current state."""
    pass


class ConfigurationError(ScriptFlowError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(message, details, original_error)


class WebhookCorrelationError(ScriptFlowError):
    """
    Raised when a webhook event lacks the cross-referenced data it needs.

    Surfaces as a 500 so the provider redelivers the event later.
    """

    def __init__(
        self,
        message: str,
        event_type: Optional[str] = None,
        missing_fields: Optional[list] = None,
    ):
        details: Dict[str, Any] = {}
        if event_type:
            details["event_type"] = event_type
        if missing_fields:
            details["missing_fields"] = missing_fields
        super().__init__(message, details)
