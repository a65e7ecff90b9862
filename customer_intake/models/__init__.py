"""Domain models for customer intake."""

from customer_intake.models.base import Event
from customer_intake.models.customer import CustomerRecord, CustomerRegistration, CustomerUpdate
from customer_intake.models.enums import (
    AcquisitionSource,
    BrazilianState,
    CompletionMarker,
    ServiceType,
    form_options,
)

__all__ = [
    "AcquisitionSource",
    "BrazilianState",
    "CompletionMarker",
    "CustomerRecord",
    "CustomerRegistration",
    "CustomerUpdate",
    "Event",
    "ServiceType",
    "form_options",
]
