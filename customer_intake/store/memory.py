"""In-memory record store for tests and local runs."""

from __future__ import annotations

from typing import Iterable, Mapping

from customer_intake.exceptions import RecordNotFoundError
from customer_intake.store.base import HEADERS, RecordStore, Row


class MemoryRow(Row):
    """Detached copy of a stored row; edits land on ``save()``."""

    def __init__(self, store: InMemoryRecordStore, row_number: int, values: dict[str, str]) -> None:
        self._store = store
        self.row_number = row_number
        self._values = dict(values)

    def get(self, header: str) -> str | None:
        return self._values.get(header)

    def set(self, header: str, value: str) -> None:
        self._values[header] = value

    def save(self) -> None:
        self._store._write(self.row_number, self._values)

    def delete(self) -> None:
        self._store._remove(self.row_number)


class InMemoryRecordStore(RecordStore):
    """Record store backed by a list of dicts.

    Rows are numbered like a spreadsheet: the header occupies row 1, so the
    first data row is row 2. Row numbers are never reused, and neither are
    identifiers handed out by ``next_identifier()``.

    Parameters
    ----------
    rows : Iterable[Mapping[str, str]]
        Initial table content, one mapping of header to cell per row.
    title : str
        Table title reported to diagnostics.
    headers : Iterable[str] | None
        Column layout reported by ``headers``; defaults to the intake layout.
    """

    def __init__(
        self,
        rows: Iterable[Mapping[str, str]] = (),
        title: str = "Cadastro de Clientes",
        headers: Iterable[str] | None = None,
    ) -> None:
        self.title = title
        self._headers = list(headers) if headers is not None else list(HEADERS)
        self._rows: dict[int, dict[str, str]] = {}
        self._next_row_number = 2
        self._id_high_water = 0
        for values in rows:
            self._insert(values)

    @property
    def headers(self) -> list[str]:
        return list(self._headers)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def snapshot(self) -> list[dict[str, str]]:
        """Return a copy of the stored cells, in table order."""
        return [dict(values) for values in self._rows.values()]

    def list_rows(self) -> list[Row]:
        return [MemoryRow(self, number, values) for number, values in self._rows.items()]

    def append_row(self, values: Mapping[str, str]) -> Row:
        row_number = self._insert(values)
        return MemoryRow(self, row_number, self._rows[row_number])

    def next_identifier(self) -> int:
        self._id_high_water = max(self._id_high_water + 1, super().next_identifier())
        return self._id_high_water

    def _insert(self, values: Mapping[str, str]) -> int:
        row_number = self._next_row_number
        self._next_row_number += 1
        self._rows[row_number] = dict(values)
        return row_number

    def _write(self, row_number: int, values: Mapping[str, str]) -> None:
        if row_number not in self._rows:
            raise RecordNotFoundError(f"Linha {row_number} não existe mais")
        self._rows[row_number] = dict(values)

    def _remove(self, row_number: int) -> None:
        if self._rows.pop(row_number, None) is None:
            raise RecordNotFoundError(f"Linha {row_number} não existe mais")
