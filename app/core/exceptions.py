from typing import Optional, Dict, Any


class BrewMateException(Exception):
    """Base exception for BrewMate backend."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class TasteValidationError(BrewMateException):
    """Raised when a taste intensity cannot be resolved to a 0-10 value."""

    def __init__(self, field_name: str):
        super().__init__(
            f"Invalid value for {field_name}",
            details={"field": field_name},
        )
        self.field_name = field_name


class SignalConflictError(BrewMateException):
    """Raised when a signal row keeps changing underneath a write."""

    pass


class PermissionDeniedError(BrewMateException):
    """Raised when user doesn't have permission for an action."""

    pass
