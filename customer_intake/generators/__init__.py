"""Sample data generators."""

from customer_intake.generators.customer import IntakeGenerator, generate_customer_code

__all__ = ["IntakeGenerator", "generate_customer_code"]
