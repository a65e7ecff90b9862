#!/usr/bin/env python3
"""Check that the configured record store is reachable and laid out correctly.

Reports which credentials are set, the table title and row count, and
compares the stored headers against the expected intake layout. With
``--write-test-row`` it also registers a throwaway customer and deletes it
again, exercising the full write path.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from customer_intake.config import IntakeConfig
from customer_intake.logging import setup_logging
from customer_intake.models import CustomerRegistration
from customer_intake.service import CustomerService
from customer_intake.store import HEADERS

logger = logging.getLogger(__name__)

# Substring of a backend error -> likely cause
ERROR_HINTS = {
    "could not connect": "PostgreSQL host or port unreachable",
    "Connection refused": "PostgreSQL host or port unreachable",
    "password authentication failed": "Invalid database user or password",
    "does not exist": "Database name is wrong or was not created",
    "permission denied": "Database user lacks privileges on the intake table",
}

TEST_CUSTOMER = CustomerRegistration(
    customer_code="TEST123",
    full_name="Cliente Teste",
    email="teste@exemplo.com",
    phone="(11) 99999-9999",
    address="Rua Teste, 123",
    city="São Paulo",
    state="sp",
    zip_code="01234-567",
    acquisition_source="other",
    service_type="other",
    observations="Test row, safe to remove",
)


def report_credentials(config: IntakeConfig) -> bool:
    """Log which required credentials are set. Returns False if any is missing."""
    if config.store_backend != "postgres":
        logger.info("Store backend: %s (no credentials required)", config.store_backend)
        return True

    missing = set(config.postgres.missing_credentials())
    for env in config.postgres.REQUIRED_ENV.values():
        logger.info("  %s: %s", env, "NOT SET" if env in missing else "set")
    return not missing


def report_hint(error: str) -> None:
    for needle, hint in ERROR_HINTS.items():
        if needle in error:
            logger.error("Hint: %s", hint)
            return


def write_test_row(service: CustomerService) -> bool:
    """Register and then delete a throwaway customer."""
    logger.info("Writing test row...")
    registered = service.register(TEST_CUSTOMER)
    if not registered.success:
        logger.error("  [FAIL] register: %s", registered.error)
        return False
    logger.info("  [OK] test row added at row %d (ID %d)", registered.row_number, registered.customer_id)

    deleted = service.delete(registered.customer_id)
    if not deleted.success:
        logger.error("  [FAIL] delete: %s", deleted.error)
        return False
    logger.info("  [OK] test row removed")
    return True


def check(service: CustomerService, write: bool = False) -> int:
    """Run the connection and header checks; returns the process exit code."""
    result = service.check_connection()
    if not result.success:
        logger.error("Connection failed: %s", result.error)
        report_hint(result.error or "")
        return 1

    logger.info("Connected to: %s (%d rows)", result.title, result.row_count)
    logger.info("Header check:")
    for position, expected in enumerate(HEADERS):
        found = result.headers[position] if position < len(result.headers) else None
        status = "[OK]" if found == expected else f"[FAIL] found {found!r}"
        logger.info("  %2d. %s %s", position + 1, expected, status)

    if result.missing_headers:
        logger.error("Missing headers: %s", ", ".join(result.missing_headers))
        return 1

    if write and not write_test_row(service):
        return 1

    logger.info("Record store check complete")
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Check the customer intake record store")
    parser.add_argument(
        "--write-test-row",
        action="store_true",
        help="Register and delete a test customer",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override LOG_LEVEL",
    )
    args = parser.parse_args()

    config = IntakeConfig.from_env()
    setup_logging(args.log_level or config.log_level, config.log_format)

    logger.info("Checking credentials...")
    if not report_credentials(config):
        logger.error("Required credentials are missing")
        return 1

    with CustomerService.from_config(config) as service:
        return check(service, write=args.write_test_row)


if __name__ == "__main__":
    sys.exit(main())
