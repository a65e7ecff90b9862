"""Field validators for the intake form.

Validators are total: they never raise and always return a
``ValidationResult``. The email pattern is deliberately permissive and
does not attempt full RFC 5322 coverage.
"""

import re
from dataclasses import dataclass

from customer_intake.validation.formatters import strip_digits

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
CEP_PATTERN = re.compile(r"\d{5}-?\d{3}", re.ASCII)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single field validation."""

    is_valid: bool
    message: str | None = None


VALID = ValidationResult(is_valid=True)


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(is_valid=False, message=message)


def validate_name(name: str) -> ValidationResult:
    """Check a full name: required, 2 to 100 characters, not trimmed."""
    if not name:
        return _invalid("Nome é obrigatório")
    if len(name) < NAME_MIN_LENGTH:
        return _invalid(f"Nome deve ter pelo menos {NAME_MIN_LENGTH} caracteres")
    if len(name) > NAME_MAX_LENGTH:
        return _invalid(f"Nome deve ter no máximo {NAME_MAX_LENGTH} caracteres")
    return VALID


def validate_email(email: str) -> ValidationResult:
    """Check an email address against a simple ``local@domain.tld`` shape."""
    if not email:
        return _invalid("Email é obrigatório")
    if not EMAIL_PATTERN.fullmatch(email):
        return _invalid("Formato de email inválido")
    return VALID


def validate_phone(phone: str) -> ValidationResult:
    """Check that a phone carries 10 or 11 digits once punctuation is dropped."""
    if not phone:
        return _invalid("Telefone é obrigatório")
    if len(strip_digits(phone)) not in (10, 11):
        return _invalid("Telefone deve ter 10 ou 11 dígitos")
    return VALID


def validate_cep(cep: str) -> ValidationResult:
    """Check a CEP (postal code); empty is valid because the field is optional."""
    if not cep:
        return VALID
    if not CEP_PATTERN.fullmatch(cep):
        return _invalid("CEP deve ter o formato 12345-678")
    return VALID


def validate_registration_fields(
    full_name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
    zip_code: str | None = None,
) -> tuple[str, ValidationResult] | None:
    """Run the field validators in form order and report the first failure.

    Fields passed as ``None`` are skipped, which lets partial updates check
    only what they change.

    Returns
    -------
    tuple[str, ValidationResult] | None
        ``(field_name, result)`` for the first failing field, or ``None``
        when every checked field is valid.
    """
    checks = (
        ("full_name", full_name, validate_name),
        ("email", email, validate_email),
        ("phone", phone, validate_phone),
        ("zip_code", zip_code, validate_cep),
    )
    for field_name, value, validator in checks:
        if value is None:
            continue
        result = validator(value)
        if not result.is_valid:
            return field_name, result
    return None
