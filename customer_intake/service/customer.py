"""Customer record service: register, list, update and delete intake rows.

The service is the error boundary of the package. Validation failures,
missing rows, configuration gaps and backend faults all come back as
``success=False`` results; nothing raises past these methods.

Each operation opens its own store through ``store_factory`` and performs a
full read before writing. There is no locking: two concurrent edits of the
same customer resolve as last write wins.

Result messages are user-facing and written in Portuguese, like the column
headers and catalog labels. Log lines are for operators and stay in English.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Protocol

from customer_intake.config import IntakeConfig
from customer_intake.exceptions import IntakeError, RecordNotFoundError, SinkError, ValidationError
from customer_intake.generators.customer import generate_customer_code
from customer_intake.models import CompletionMarker, CustomerRecord, CustomerRegistration, CustomerUpdate, Event
from customer_intake.service.results import (
    ConnectionResult,
    DeleteResult,
    ListResult,
    OperationResult,
    RegisterResult,
    UpdateResult,
)
from customer_intake.sinks.serialization import to_dict
from customer_intake.store import store_factory as build_store_factory
from customer_intake.store.base import (
    COMPLETED,
    FIELD_HEADERS,
    FULL_NAME,
    HEADERS,
    ID,
    RecordStore,
    Row,
    parse_identifier,
)
from customer_intake.validation import format_cep, format_phone, validate_registration_fields

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"
EVENT_SOURCE = "customer-intake"

# Shown when an exception carries no message of its own
UNKNOWN_ERRORS = {
    "register": "Erro desconhecido ao cadastrar cliente",
    "list": "Falha ao carregar clientes",
    "update": "Falha ao atualizar cliente",
    "delete": "Falha ao excluir cliente",
    "check_connection": "Erro desconhecido ao conectar",
}


class EventSink(Protocol):
    def publish(self, event: Event) -> None: ...

    def close(self) -> None: ...


def row_identifier(row: Row, position: int) -> int:
    """Identifier of a row; blank or unparseable cells fall back to ``position + 1``."""
    parsed = parse_identifier(row.get(ID))
    return parsed if parsed is not None else position + 1


def row_to_record(row: Row, position: int) -> CustomerRecord:
    """Rebuild a ``CustomerRecord`` from raw cells, defaulting absent text to ``""``."""
    values = {
        attr: row.get(header) or ""
        for attr, header in FIELD_HEADERS.items()
        if attr not in ("id", "is_completed")
    }
    return CustomerRecord(
        id=row_identifier(row, position),
        is_completed=CompletionMarker.decode(row.get(COMPLETED)),
        **values,
    )


def _check_fields(**values: str | None) -> None:
    """Raise ``ValidationError`` for the first invalid field, in form order."""
    failure = validate_registration_fields(**values)
    if failure is not None:
        field_name, result = failure
        raise ValidationError(field_name, result.message or "Valor inválido")


def _cell(attr: str, value: str | bool) -> str:
    """Encode an attribute value the way it is stored."""
    if attr == "is_completed":
        return CompletionMarker.encode(bool(value))
    if attr == "phone":
        return format_phone(str(value))
    if attr == "zip_code":
        return format_cep(str(value))
    return str(value)


def _context(operation: str, **values: Any) -> dict[str, Any]:
    """``extra=`` payload for a log call; ``None`` values are left out."""
    return {"operation": operation, **{k: v for k, v in values.items() if v is not None}}


class CustomerService:
    """Orchestrates customer CRUD against a record store.

    Usable as a context manager; leaving the block closes the event sink so
    queued events are delivered before the process exits.

    Parameters
    ----------
    store_factory : Callable[[], RecordStore]
        Returns an unopened store; called once per operation.
    clock : Callable[[], datetime]
        Source of the registration date.
    event_sink : EventSink | None
        Receives lifecycle events after successful writes.
    """

    def __init__(
        self,
        store_factory: Callable[[], RecordStore],
        clock: Callable[[], datetime] = datetime.now,
        event_sink: EventSink | None = None,
    ) -> None:
        self._store_factory = store_factory
        self._clock = clock
        self._event_sink = event_sink

    @classmethod
    def from_config(cls, config: IntakeConfig) -> CustomerService:
        """Wire store and optional Kafka sink from configuration."""
        event_sink = None
        if config.kafka.enabled:
            from customer_intake.sinks.kafka import KafkaEventSink

            event_sink = KafkaEventSink(config.kafka)
        return cls(build_store_factory(config), event_sink=event_sink)

    def __enter__(self) -> CustomerService:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Flush and release the event sink, if any."""
        if self._event_sink is not None:
            self._event_sink.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def register(self, data: CustomerRegistration) -> RegisterResult:
        """Validate, normalize and append a new customer row."""
        customer_code = data.customer_code or generate_customer_code()
        logger.info("Registering customer %s", customer_code, extra=_context("register", customer_code=customer_code))
        try:
            _check_fields(
                full_name=data.full_name,
                email=data.email,
                phone=data.phone,
                zip_code=data.zip_code,
            )
            with self._store_factory() as store:
                customer_id = store.next_identifier()
                record = CustomerRecord(
                    id=customer_id,
                    customer_code=customer_code,
                    full_name=data.full_name,
                    email=data.email,
                    phone=format_phone(data.phone),
                    address=data.address,
                    city=data.city,
                    state=data.state,
                    zip_code=format_cep(data.zip_code),
                    acquisition_source=data.acquisition_source,
                    service_type=data.service_type,
                    is_completed=data.is_completed,
                    observations=data.observations,
                    registration_date=self._clock().strftime(DATE_FORMAT),
                )
                row = store.append_row(self._record_cells(record))
        except Exception as e:
            return self._failure(RegisterResult, "register", e, customer_code=customer_code)

        logger.info(
            "Customer %s registered with ID %d at row %d",
            customer_code,
            customer_id,
            row.row_number,
            extra=_context("register", customer_id=customer_id, customer_code=customer_code),
        )
        self._emit("customer.registered", customer_id, to_dict(record))
        return RegisterResult(
            success=True,
            message=f"Cliente registrado com sucesso! Código: {customer_code}",
            customer_id=customer_id,
            customer_code=customer_code,
            row_number=row.row_number,
        )

    def list_customers(self) -> ListResult:
        """Return every stored customer in table order."""
        try:
            with self._store_factory() as store:
                rows = store.list_rows()
        except Exception as e:
            return self._failure(ListResult, "list", e)

        customers = [row_to_record(row, position) for position, row in enumerate(rows)]
        logger.info("Loaded %d customers", len(customers), extra=_context("list"))
        return ListResult(
            success=True,
            message=f"{len(customers)} cliente(s) carregado(s)",
            customers=customers,
            count=len(customers),
        )

    def search(self, term: str) -> ListResult:
        """List customers whose name, email or code contains ``term`` (any case) or whose phone contains it."""
        result = self.list_customers()
        if not result.success or not term.strip():
            return result

        needle = term.lower()
        matches = [
            c
            for c in result.customers
            if needle in c.full_name.lower()
            or needle in c.email.lower()
            or needle in c.customer_code.lower()
            or term in c.phone
        ]
        return ListResult(
            success=True,
            message=f"{len(matches)} cliente(s) encontrado(s)",
            customers=matches,
            count=len(matches),
        )

    def update(self, customer_id: int, changes: CustomerUpdate) -> UpdateResult:
        """Overwrite the present fields of one customer row.

        An empty update still checks that the customer exists but writes
        nothing and publishes no event.
        """
        present = changes.present_fields()
        try:
            _check_fields(
                full_name=present.get("full_name"),
                email=present.get("email"),
                phone=present.get("phone"),
                zip_code=present.get("zip_code"),
            )
            with self._store_factory() as store:
                row = self._find_row(store, customer_id)
                if not changes.is_empty():
                    for attr, value in present.items():
                        row.set(FIELD_HEADERS[attr], _cell(attr, value))
                    row.save()
        except Exception as e:
            return self._failure(UpdateResult, "update", e, customer_id=customer_id)

        if changes.is_empty():
            logger.info("Customer %d unchanged", customer_id, extra=_context("update", customer_id=customer_id))
        else:
            logger.info(
                "Customer %d updated: %s",
                customer_id,
                ", ".join(present),
                extra=_context("update", customer_id=customer_id),
            )
            self._emit("customer.updated", customer_id, {attr: _cell(attr, v) for attr, v in present.items()})
        return UpdateResult(
            success=True,
            message=f"Cliente {customer_id} atualizado com sucesso",
            customer_id=customer_id,
        )

    def delete(self, customer_id: int) -> DeleteResult:
        """Remove one customer row and report the deleted name."""
        try:
            with self._store_factory() as store:
                row = self._find_row(store, customer_id)
                name = row.get(FULL_NAME) or ""
                row.delete()
        except Exception as e:
            return self._failure(DeleteResult, "delete", e, customer_id=customer_id)

        logger.info("Customer %d (%s) deleted", customer_id, name, extra=_context("delete", customer_id=customer_id))
        self._emit("customer.deleted", customer_id, {"full_name": name})
        return DeleteResult(
            success=True,
            message=f"Cliente {name} excluído com sucesso",
            customer_id=customer_id,
            deleted_name=name,
        )

    def check_connection(self) -> ConnectionResult:
        """Open the store and report its title, size and header layout."""
        try:
            with self._store_factory() as store:
                headers = store.headers
                row_count = len(store.list_rows())
                title = store.title
        except Exception as e:
            return self._failure(ConnectionResult, "check_connection", e)

        missing = [h for h in HEADERS if h not in headers]
        if missing:
            logger.warning(
                "Record store %r is missing headers: %s",
                title,
                ", ".join(missing),
                extra=_context("check_connection"),
            )
        return ConnectionResult(
            success=True,
            message=f"Conectado a: {title}",
            title=title,
            row_count=row_count,
            headers=headers,
            missing_headers=missing,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _record_cells(record: CustomerRecord) -> dict[str, str]:
        return {
            header: str(record.id) if attr == "id" else _cell(attr, getattr(record, attr))
            for attr, header in FIELD_HEADERS.items()
        }

    @staticmethod
    def _find_row(store: RecordStore, customer_id: int) -> Row:
        for position, row in enumerate(store.list_rows()):
            if row_identifier(row, position) == customer_id:
                return row
        raise RecordNotFoundError(f"Cliente com ID {customer_id} não encontrado")

    def _emit(self, event_type: str, customer_id: int, data: dict) -> None:
        if self._event_sink is None:
            return
        event = Event(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            event_time=datetime.now(),
            source=EVENT_SOURCE,
            subject=str(customer_id),
            data=data,
        )
        try:
            self._event_sink.publish(event)
        except SinkError as e:
            # The row is already written; the event is best-effort
            logger.warning(
                "Could not publish %s for customer %d: %s",
                event_type,
                customer_id,
                e,
                extra=_context(event_type, customer_id=customer_id),
            )

    @staticmethod
    def _failure(
        result_type: type[OperationResult],
        operation: str,
        error: Exception,
        customer_code: str | None = None,
        **fields,
    ) -> OperationResult:
        if isinstance(error, ValidationError):
            fields["field"] = error.field
        context = _context(
            operation,
            customer_id=fields.get("customer_id"),
            customer_code=customer_code,
            field=fields.get("field"),
        )
        if isinstance(error, (ValidationError, RecordNotFoundError)):
            logger.warning("Could not %s: %s", operation, error, extra=context)
        elif isinstance(error, IntakeError):
            logger.error("Could not %s: %s", operation, error, extra=context)
        else:
            logger.exception("Unexpected error during %s", operation, extra=context)
        message = str(error) or UNKNOWN_ERRORS[operation]
        return result_type(success=False, error=message, **fields)
