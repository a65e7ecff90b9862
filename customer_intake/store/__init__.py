"""Record store adapters for customer rows."""

from typing import Callable

from customer_intake.config import IntakeConfig
from customer_intake.store.base import FIELD_HEADERS, HEADERS, RecordStore, Row, parse_identifier
from customer_intake.store.memory import InMemoryRecordStore

__all__ = [
    "FIELD_HEADERS",
    "HEADERS",
    "InMemoryRecordStore",
    "RecordStore",
    "Row",
    "parse_identifier",
    "store_factory",
]


def store_factory(config: IntakeConfig) -> Callable[[], RecordStore]:
    """Return a callable producing an unopened store per operation.

    PostgreSQL gets a fresh adapter (and connection) per call; the
    in-memory backend hands out one shared table so data survives
    between operations.
    """
    if config.store_backend == "postgres":
        from customer_intake.store.postgres import PostgresRecordStore

        return lambda: PostgresRecordStore(config.postgres)

    shared = InMemoryRecordStore()
    return lambda: shared
