"""Custom exception hierarchy for customer-intake."""


class IntakeError(Exception):
    """Base exception for all customer-intake errors."""


class ValidationError(IntakeError):
    """Raised when a field fails a validation rule."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class RecordNotFoundError(IntakeError):
    """Raised when no stored row carries the requested identifier."""


class BackendError(IntakeError):
    """Raised when the record store cannot be reached or refuses an operation."""


class ConfigurationError(BackendError):
    """Raised when configuration is invalid or missing."""


class SinkError(IntakeError):
    """Raised when an event sink operation fails."""
