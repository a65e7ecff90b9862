#!/usr/bin/env python3
"""Register generated sample customers through the intake service.

Useful for populating a development table: every payload goes through the
same validation, formatting and identifier assignment as a form submission.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from customer_intake.config import IntakeConfig
from customer_intake.generators import IntakeGenerator
from customer_intake.logging import setup_logging
from customer_intake.service import CustomerService

logger = logging.getLogger(__name__)


def seed(service: CustomerService, generator: IntakeGenerator, count: int) -> tuple[int, int]:
    """Register ``count`` generated customers.

    Returns
    -------
    tuple[int, int]
        Number of registered and rejected payloads.
    """
    registered = 0
    rejected = 0
    for payload in generator.generate_batch(count):
        result = service.register(payload)
        if result.success:
            registered += 1
            logger.debug("Registered %s as ID %d", result.customer_code, result.customer_id)
        else:
            rejected += 1
            logger.warning("Rejected %s: %s", payload.full_name, result.error)
    return registered, rejected


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed the intake table with sample customers")
    parser.add_argument(
        "--customers",
        type=int,
        default=20,
        help="Number of customers to register (default: 20)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    args = parser.parse_args()

    config = IntakeConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    generator = IntakeGenerator(seed=args.seed)

    with CustomerService.from_config(config) as service:
        t0 = time.perf_counter()
        registered, rejected = seed(service, generator, args.customers)
        logger.info(
            "Seeded %d customers (%d rejected) in %.1fs",
            registered,
            rejected,
            time.perf_counter() - t0,
        )

        listing = service.list_customers()
        if listing.success:
            logger.info("Table now holds %d customers", listing.count)
    return 0 if rejected == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
