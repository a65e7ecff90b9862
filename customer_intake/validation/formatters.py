"""Canonical display formats for Brazilian phone numbers and CEPs.

Formatters are best-effort: input that does not carry the expected number
of digits is returned unchanged.
"""

import re

_NON_DIGIT = re.compile(r"\D", re.ASCII)


def strip_digits(value: str) -> str:
    """Drop every non-digit character."""
    return _NON_DIGIT.sub("", value)


def format_phone(phone: str) -> str:
    """Format a phone as ``(DD) DDDDD-DDDD`` (mobile) or ``(DD) DDDD-DDDD`` (landline).

    Parameters
    ----------
    phone : str
        Raw phone input, with or without punctuation.

    Returns
    -------
    str
        Formatted phone, or ``phone`` untouched when it does not hold
        10 or 11 digits.
    """
    digits = strip_digits(phone)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return phone


def format_cep(cep: str) -> str:
    """Format a CEP as ``DDDDD-DDD``; anything but 8 digits is returned unchanged."""
    digits = strip_digits(cep)
    if len(digits) == 8:
        return f"{digits[:5]}-{digits[5:]}"
    return cep
