"""Customer code and sample intake payload generation."""

from __future__ import annotations

import random
import time
from typing import Iterator

from customer_intake.generators.base import BaseGenerator
from customer_intake.models import AcquisitionSource, BrazilianState, CustomerRegistration, ServiceType

CUSTOMER_CODE_PREFIX = "CUST"


def generate_customer_code(now_ms: int | None = None, rng: random.Random | None = None) -> str:
    """Build a registration code: ``CUST`` + last 6 clock digits + 3 random digits.

    Codes are only likely to be distinct, not guaranteed unique.

    Parameters
    ----------
    now_ms : int | None
        Epoch time in milliseconds; defaults to the current time.
    rng : random.Random | None
        Source for the random suffix.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = (rng or random).randrange(1000)
    return f"{CUSTOMER_CODE_PREFIX}{str(now_ms)[-6:]}{suffix:03d}"


class IntakeGenerator(BaseGenerator):
    """Generate realistic intake form submissions."""

    COMPLETED_RATE = 0.3
    OBSERVATION_RATE = 0.5

    def generate(self) -> CustomerRegistration:
        """Generate a single registration payload.

        Returns
        -------
        CustomerRegistration
            Payload that passes every field validator.
        """
        fake = self.fake
        rng = self.random
        return CustomerRegistration(
            full_name=fake.name(),
            email=fake.email(),
            phone=self._phone(),
            address=f"{fake.street_name()}, {rng.randint(1, 9999)}",
            city=fake.city(),
            state=rng.choice(list(BrazilianState)).value,
            zip_code=fake.postcode(),
            acquisition_source=rng.choice(list(AcquisitionSource)).value,
            service_type=rng.choice(list(ServiceType)).value,
            is_completed=rng.random() < self.COMPLETED_RATE,
            observations=fake.sentence() if rng.random() < self.OBSERVATION_RATE else "",
        )

    def generate_batch(self, count: int) -> Iterator[CustomerRegistration]:
        """Generate multiple registration payloads.

        Parameters
        ----------
        count : int
            Number of payloads to generate.

        Yields
        ------
        CustomerRegistration
            Generated payloads.
        """
        for _ in range(count):
            yield self.generate()

    def _phone(self) -> str:
        """Mobile (11 digits) or landline (10 digits), raw or punctuated."""
        rng = self.random
        area = rng.randint(11, 99)
        if rng.random() < 0.8:
            digits = f"{area}9{rng.randint(0, 99_999_999):08d}"
        else:
            digits = f"{area}{rng.randint(2, 5)}{rng.randint(0, 9_999_999):07d}"
        if rng.random() < 0.5:
            return digits
        return f"({digits[:2]}) {digits[2:-4]}-{digits[-4:]}"
