"""Customer record service and its result types."""

from customer_intake.service.customer import CustomerService, row_to_record
from customer_intake.service.results import (
    ConnectionResult,
    DeleteResult,
    ListResult,
    OperationResult,
    RegisterResult,
    UpdateResult,
)

__all__ = [
    "ConnectionResult",
    "CustomerService",
    "DeleteResult",
    "ListResult",
    "OperationResult",
    "RegisterResult",
    "UpdateResult",
    "row_to_record",
]
