"""PostgreSQL record store.

The table mirrors the intake sheet: one TEXT column per header, named
exactly like the header, plus a hidden ``row_number`` key that plays the
part of the sheet row position. Statements run in autocommit mode, so each
write is durable on its own and no multi-row transaction is implied.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import psycopg
from psycopg import sql

from customer_intake.config import PostgresConfig
from customer_intake.exceptions import BackendError, RecordNotFoundError
from customer_intake.store.base import HEADERS, RecordStore, Row

logger = logging.getLogger(__name__)

ROW_KEY = "row_number"


class PostgresRow(Row):
    """Row fetched from PostgreSQL; staged edits are written by ``save()``."""

    def __init__(self, store: PostgresRecordStore, row_number: int, values: dict[str, Any]) -> None:
        self._store = store
        self.row_number = row_number
        self._values = values
        self._dirty: set[str] = set()

    def get(self, header: str) -> str | None:
        return self._values.get(header)

    def set(self, header: str, value: str) -> None:
        self._values[header] = value
        self._dirty.add(header)

    def save(self) -> None:
        if not self._dirty:
            return
        self._store._update(self.row_number, {h: self._values[h] for h in self._dirty})
        self._dirty.clear()

    def delete(self) -> None:
        self._store._delete(self.row_number)


class PostgresRecordStore(RecordStore):
    """Record store backed by a PostgreSQL table.

    Parameters
    ----------
    config : PostgresConfig
        Connection settings; opening fails with ``ConfigurationError``
        when a credential is missing.
    create_schema : bool
        Create the table and identifier sequence on open if absent.
    """

    def __init__(self, config: PostgresConfig, create_schema: bool = True) -> None:
        self.config = config
        self.title = config.table
        self.create_schema = create_schema
        self._conn: psycopg.Connection | None = None

    @property
    def _table(self) -> sql.Identifier:
        return sql.Identifier(self.config.table)

    @property
    def _sequence(self) -> str:
        return f"{self.config.table}_id_seq"

    @property
    def _sequence_regclass(self) -> str:
        # regclass text is parsed as SQL; quoting keeps mixed-case names intact
        return '"' + self._sequence.replace('"', '""') + '"'

    def open(self) -> None:
        conninfo = self.config.connection_string
        try:
            self._conn = psycopg.connect(conninfo, autocommit=True)
        except psycopg.Error as e:
            raise BackendError(f"Não foi possível conectar ao PostgreSQL: {e}") from e
        logger.debug("Connected to %s:%d/%s", self.config.host, self.config.port, self.config.database)

        if self.create_schema:
            try:
                self.ensure_schema()
            except BaseException:
                self.close()
                raise

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def ensure_schema(self) -> None:
        """Create the intake table and its identifier sequence."""
        columns = sql.SQL(", ").join(
            sql.SQL("{} TEXT NOT NULL DEFAULT ''").format(sql.Identifier(header)) for header in HEADERS
        )
        self._execute(
            sql.SQL("CREATE TABLE IF NOT EXISTS {} ({} BIGSERIAL PRIMARY KEY, {})").format(
                self._table, sql.Identifier(ROW_KEY), columns
            )
        )
        self._execute(sql.SQL("CREATE SEQUENCE IF NOT EXISTS {}").format(sql.Identifier(self._sequence)))

    @property
    def headers(self) -> list[str]:
        rows = self._execute(
            "SELECT column_name FROM information_schema.columns "
            "WHERE table_name = %s ORDER BY ordinal_position",
            (self.config.table,),
        ).fetchall()
        return [name for (name,) in rows if name != ROW_KEY]

    def list_rows(self) -> list[Row]:
        query = sql.SQL("SELECT {}, {} FROM {} ORDER BY {}").format(
            sql.Identifier(ROW_KEY),
            sql.SQL(", ").join(sql.Identifier(h) for h in HEADERS),
            self._table,
            sql.Identifier(ROW_KEY),
        )
        rows = self._execute(query).fetchall()
        return [PostgresRow(self, row[0], dict(zip(HEADERS, row[1:]))) for row in rows]

    def append_row(self, values: Mapping[str, str]) -> Row:
        headers = [h for h in HEADERS if h in values]
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING {}").format(
            self._table,
            sql.SQL(", ").join(sql.Identifier(h) for h in headers),
            sql.SQL(", ").join(sql.Placeholder() for _ in headers),
            sql.Identifier(ROW_KEY),
        )
        (row_number,) = self._execute(query, [values[h] for h in headers]).fetchone()
        return PostgresRow(self, row_number, {h: values[h] for h in headers})

    def next_identifier(self) -> int:
        floor = super().next_identifier()
        (value,) = self._execute("SELECT nextval(%s::regclass)", [self._sequence_regclass]).fetchone()
        if value < floor:
            # Rows written outside the sequence; move it past them
            self._execute("SELECT setval(%s::regclass, %s)", [self._sequence_regclass, floor])
            value = floor
        return value

    def _update(self, row_number: int, values: Mapping[str, str]) -> None:
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(h), sql.Placeholder()) for h in values
        )
        query = sql.SQL("UPDATE {} SET {} WHERE {} = %s").format(
            self._table, assignments, sql.Identifier(ROW_KEY)
        )
        cursor = self._execute(query, [*values.values(), row_number])
        if cursor.rowcount == 0:
            raise RecordNotFoundError(f"Linha {row_number} não existe mais")

    def _delete(self, row_number: int) -> None:
        query = sql.SQL("DELETE FROM {} WHERE {} = %s").format(self._table, sql.Identifier(ROW_KEY))
        cursor = self._execute(query, [row_number])
        if cursor.rowcount == 0:
            raise RecordNotFoundError(f"Linha {row_number} não existe mais")

    def _execute(self, query: Any, params: Any = None) -> psycopg.Cursor:
        if self._conn is None:
            raise BackendError("Conexão com o PostgreSQL não está aberta")
        try:
            return self._conn.execute(query, params)
        except psycopg.Error as e:
            logger.error("PostgreSQL statement failed: %s", e)
            raise BackendError(str(e)) from e
