"""Field validation and canonical formatting for intake data."""

from customer_intake.validation.formatters import format_cep, format_phone, strip_digits
from customer_intake.validation.validators import (
    ValidationResult,
    validate_cep,
    validate_email,
    validate_name,
    validate_phone,
    validate_registration_fields,
)

__all__ = [
    "ValidationResult",
    "format_cep",
    "format_phone",
    "strip_digits",
    "validate_cep",
    "validate_email",
    "validate_name",
    "validate_phone",
    "validate_registration_fields",
]
