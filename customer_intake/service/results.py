"""Uniform result objects returned by the customer service.

Every operation returns one of these instead of raising: ``success`` tells
the caller which of ``message`` or ``error`` to show.
"""

from dataclasses import dataclass, field

from customer_intake.models import CustomerRecord
from customer_intake.sinks.serialization import to_dict


@dataclass
class OperationResult:
    """Base result shape."""

    success: bool
    message: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        """JSON-safe dict for the presentation layer."""
        return to_dict(self)


@dataclass
class RegisterResult(OperationResult):
    customer_id: int | None = None
    customer_code: str | None = None
    row_number: int | None = None
    # Field that failed validation, if any
    field: str | None = None


@dataclass
class ListResult(OperationResult):
    customers: list[CustomerRecord] = field(default_factory=list)
    count: int = 0


@dataclass
class UpdateResult(OperationResult):
    customer_id: int | None = None
    field: str | None = None


@dataclass
class DeleteResult(OperationResult):
    customer_id: int | None = None
    deleted_name: str | None = None


@dataclass
class ConnectionResult(OperationResult):
    title: str | None = None
    row_count: int = 0
    headers: list[str] = field(default_factory=list)
    missing_headers: list[str] = field(default_factory=list)
