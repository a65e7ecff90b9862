"""Tests for customer code and sample payload generation."""

import random
import re

from customer_intake.generators import IntakeGenerator, generate_customer_code
from customer_intake.models import AcquisitionSource, BrazilianState, CustomerRegistration, ServiceType
from customer_intake.validation import strip_digits, validate_registration_fields

CODE_PATTERN = re.compile(r"CUST\d{9}")


class TestGenerateCustomerCode:
    """Tests for generate_customer_code."""

    def test_uses_last_six_clock_digits(self) -> None:
        code = generate_customer_code(now_ms=1_709_650_123_456, rng=random.Random(0))

        assert code.startswith("CUST123456")
        assert CODE_PATTERN.fullmatch(code)

    def test_suffix_is_zero_padded(self) -> None:
        rng = random.Random()
        rng.randrange = lambda stop: 7

        assert generate_customer_code(now_ms=1_000_000, rng=rng) == "CUST000000007"

    def test_default_clock(self) -> None:
        assert CODE_PATTERN.fullmatch(generate_customer_code())


class TestIntakeGenerator:
    """Tests for IntakeGenerator."""

    def test_generate_returns_registration(self) -> None:
        payload = IntakeGenerator(seed=42).generate()

        assert isinstance(payload, CustomerRegistration)
        assert payload.customer_code == ""

    def test_payloads_pass_validation(self) -> None:
        for payload in IntakeGenerator(seed=7).generate_batch(50):
            failure = validate_registration_fields(
                full_name=payload.full_name,
                email=payload.email,
                phone=payload.phone,
                zip_code=payload.zip_code,
            )
            assert failure is None, (payload, failure)

    def test_catalog_values(self) -> None:
        for payload in IntakeGenerator(seed=3).generate_batch(30):
            assert BrazilianState(payload.state)
            assert AcquisitionSource(payload.acquisition_source)
            assert ServiceType(payload.service_type)

    def test_phone_digit_count(self) -> None:
        generator = IntakeGenerator(seed=11)

        lengths = {len(strip_digits(generator._phone())) for _ in range(200)}

        assert lengths == {10, 11}

    def test_seed_reproducible(self) -> None:
        first = list(IntakeGenerator(seed=42).generate_batch(5))
        second = list(IntakeGenerator(seed=42).generate_batch(5))

        assert first == second

    def test_generate_batch_count(self) -> None:
        assert len(list(IntakeGenerator(seed=1).generate_batch(4))) == 4
