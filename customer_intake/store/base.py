"""Record store adapter contract.

A record store is a flat, header-indexed table: every row exposes its cells
by column header, and every cell is text. Adapters are opened per operation
through the context-manager protocol.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Mapping

# Column headers, in table order
ID = "ID"
CUSTOMER_CODE = "Código do cliente"
FULL_NAME = "Nome"
EMAIL = "Email"
PHONE = "Telefone"
ADDRESS = "Endereço"
CITY = "Cidade"
STATE = "Estado"
ZIP_CODE = "CEP"
ACQUISITION_SOURCE = "Fonte de Aquisição"
SERVICE_TYPE = "Tipo de Serviço"
COMPLETED = "Realizado"
OBSERVATIONS = "Observações"
REGISTRATION_DATE = "Data de Registro"

HEADERS: tuple[str, ...] = (
    ID,
    CUSTOMER_CODE,
    FULL_NAME,
    EMAIL,
    PHONE,
    ADDRESS,
    CITY,
    STATE,
    ZIP_CODE,
    ACQUISITION_SOURCE,
    SERVICE_TYPE,
    COMPLETED,
    OBSERVATIONS,
    REGISTRATION_DATE,
)

# CustomerRecord attribute -> column header
FIELD_HEADERS: dict[str, str] = {
    "id": ID,
    "customer_code": CUSTOMER_CODE,
    "full_name": FULL_NAME,
    "email": EMAIL,
    "phone": PHONE,
    "address": ADDRESS,
    "city": CITY,
    "state": STATE,
    "zip_code": ZIP_CODE,
    "acquisition_source": ACQUISITION_SOURCE,
    "service_type": SERVICE_TYPE,
    "is_completed": COMPLETED,
    "observations": OBSERVATIONS,
    "registration_date": REGISTRATION_DATE,
}


_IDENTIFIER_CELL = re.compile(r"\s*(\d+)\s*", re.ASCII)


def parse_identifier(cell: str | None) -> int | None:
    """Parse an ``ID`` cell holding plain ASCII digits, surrounding blanks allowed.

    Anything else (blank, signed, ``1_000``, non-ASCII digits, ``12abc``)
    yields ``None`` and the caller falls back to the row position.
    """
    if cell is None:
        return None
    match = _IDENTIFIER_CELL.fullmatch(str(cell))
    return int(match.group(1)) if match else None


class Row(ABC):
    """One table row with named-column access."""

    row_number: int

    @abstractmethod
    def get(self, header: str) -> str | None:
        """Return the cell under ``header`` (``None`` when absent)."""

    @abstractmethod
    def set(self, header: str, value: str) -> None:
        """Stage a new cell value; nothing is written until ``save()``."""

    @abstractmethod
    def save(self) -> None:
        """Persist staged changes."""

    @abstractmethod
    def delete(self) -> None:
        """Remove the row from the table."""


class RecordStore(ABC):
    """Tabular backend holding customer rows."""

    title: str = ""

    def __enter__(self) -> RecordStore:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """Acquire backend resources. No-op by default."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""

    @property
    def headers(self) -> list[str]:
        """Column headers as the backend reports them."""
        return list(HEADERS)

    @abstractmethod
    def list_rows(self) -> list[Row]:
        """Return all rows in table order."""

    @abstractmethod
    def append_row(self, values: Mapping[str, str]) -> Row:
        """Append a row and return it with its assigned position."""

    def next_identifier(self) -> int:
        """Return an identifier no current row carries.

        ``max(highest ID, row count) + 1``: on a table numbered ``1..n``
        this is ``n + 1``.
        """
        rows = self.list_rows()
        ids = [i for i in (parse_identifier(row.get(ID)) for row in rows) if i is not None]
        return max(max(ids, default=0), len(rows)) + 1
