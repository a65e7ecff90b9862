"""Tests for CustomerService: register, list, search, update, delete."""

import logging
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from customer_intake.config import IntakeConfig, KafkaConfig, PostgresConfig
from customer_intake.exceptions import BackendError, ConfigurationError, SinkError
from customer_intake.models import CustomerRegistration, CustomerUpdate, Event
from customer_intake.service import CustomerService
from customer_intake.store import InMemoryRecordStore
from customer_intake.store.base import HEADERS

from conftest import make_row


def _registration(**overrides: str) -> CustomerRegistration:
    data = {
        "full_name": "Ana Silva",
        "email": "ana@x.com",
        "phone": "11999998888",
    }
    data.update(overrides)
    return CustomerRegistration(**data)


class _BrokenStore(InMemoryRecordStore):
    """Store whose every read fails like an unreachable backend."""

    def list_rows(self):
        raise BackendError("getaddrinfo ENOTFOUND")


class TestRegister:
    """Tests for CustomerService.register."""

    def test_register_formats_and_assigns_identifier(
        self, service: CustomerService, store: InMemoryRecordStore
    ) -> None:
        result = service.register(_registration())

        assert result.success is True
        assert result.customer_id == 4
        assert result.row_number == 5
        assert result.error is None

        row = store.snapshot()[-1]
        assert row["ID"] == "4"
        assert row["Telefone"] == "(11) 99999-8888"
        assert row["Nome"] == "Ana Silva"
        assert row["Realizado"] == "N"
        assert row["Data de Registro"] == "05/03/2024"
        assert set(row) == set(HEADERS)

    def test_register_on_empty_table(self, fixed_now: datetime) -> None:
        store = InMemoryRecordStore()
        service = CustomerService(lambda: store, clock=lambda: fixed_now)

        result = service.register(_registration())

        assert result.customer_id == 1
        assert result.row_number == 2

    def test_generates_customer_code(self, service: CustomerService, store: InMemoryRecordStore) -> None:
        result = service.register(_registration())

        assert result.customer_code.startswith("CUST")
        assert len(result.customer_code) == 13
        assert store.snapshot()[-1]["Código do cliente"] == result.customer_code
        assert result.customer_code in result.message

    def test_keeps_given_customer_code(self, service: CustomerService) -> None:
        result = service.register(_registration(customer_code="CUST000111222"))

        assert result.customer_code == "CUST000111222"

    def test_formats_cep_and_completion(self, service: CustomerService, store: InMemoryRecordStore) -> None:
        data = _registration(zip_code="01234567", city="Campinas", state="sp")
        data.is_completed = True

        assert service.register(data).success is True

        row = store.snapshot()[-1]
        assert row["CEP"] == "01234-567"
        assert row["Cidade"] == "Campinas"
        assert row["Realizado"] == "S"

    def test_invalid_email_is_not_persisted(self, service: CustomerService, store: InMemoryRecordStore) -> None:
        result = service.register(_registration(email="not-an-email"))

        assert result.success is False
        assert result.error == "Formato de email inválido"
        assert result.field == "email"
        assert result.customer_id is None
        assert store.row_count == 3

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"full_name": ""}, "full_name"),
            ({"phone": "12345"}, "phone"),
            ({"zip_code": "1234-56"}, "zip_code"),
        ],
    )
    def test_first_invalid_field_reported(
        self, service: CustomerService, store: InMemoryRecordStore, overrides: dict, field: str
    ) -> None:
        result = service.register(_registration(**overrides))

        assert result.success is False
        assert result.field == field
        assert store.row_count == 3

    def test_backend_failure_becomes_result(self, fixed_now: datetime) -> None:
        service = CustomerService(lambda: _BrokenStore(), clock=lambda: fixed_now)

        result = service.register(_registration())

        assert result.success is False
        assert result.error == "getaddrinfo ENOTFOUND"

    def test_missing_configuration_becomes_result(self) -> None:
        config = IntakeConfig(store_backend="postgres", postgres=PostgresConfig())
        service = CustomerService.from_config(config)

        result = service.register(_registration())

        assert result.success is False
        assert "POSTGRES_DB" in result.error

    def test_unexpected_error_becomes_result(self) -> None:
        def factory() -> InMemoryRecordStore:
            raise RuntimeError("boom")

        result = CustomerService(factory).register(_registration())

        assert result.success is False
        assert result.error == "boom"

    def test_error_without_message_uses_default(self) -> None:
        def factory() -> InMemoryRecordStore:
            raise RuntimeError()

        result = CustomerService(factory).register(_registration())

        assert result.error == "Erro desconhecido ao cadastrar cliente"

    def test_identifiers_not_reused_after_delete(self, service: CustomerService) -> None:
        first = service.register(_registration())
        service.delete(first.customer_id)
        second = service.register(_registration(full_name="Beatriz Melo"))

        assert second.customer_id == first.customer_id + 1


class TestListCustomers:
    """Tests for CustomerService.list_customers."""

    def test_lists_in_table_order(self, service: CustomerService) -> None:
        result = service.list_customers()

        assert result.success is True
        assert result.count == 3
        assert result.message == "3 cliente(s) carregado(s)"
        assert [c.full_name for c in result.customers] == ["Bruno Costa", "Carla Souza", "Diego Lima"]
        assert [c.id for c in result.customers] == [1, 2, 3]

    def test_completion_marker_decoding(self, fixed_now: datetime) -> None:
        store = InMemoryRecordStore(
            [
                make_row(1, "A B", **{"Realizado": "N"}),
                make_row(2, "C D", **{"Realizado": "S"}),
                make_row(3, "E F", **{"Realizado": ""}),
                {"ID": "4", "Nome": "G H"},
            ]
        )
        service = CustomerService(lambda: store, clock=lambda: fixed_now)

        flags = [c.is_completed for c in service.list_customers().customers]

        assert flags == [False, True, False, False]

    def test_missing_cells_default_to_empty(self) -> None:
        store = InMemoryRecordStore([{"Nome": "Ana Silva"}])

        customer = CustomerService(lambda: store).list_customers().customers[0]

        assert customer.full_name == "Ana Silva"
        assert customer.email == ""
        assert customer.customer_code == ""
        assert customer.registration_date == ""

    def test_identifier_falls_back_to_position(self) -> None:
        store = InMemoryRecordStore([make_row(5, "A B"), make_row("", "C D"), make_row("abc", "E F")])

        ids = [c.id for c in CustomerService(lambda: store).list_customers().customers]

        assert ids == [5, 2, 3]

    def test_empty_table(self) -> None:
        result = CustomerService(lambda: InMemoryRecordStore()).list_customers()

        assert result.success is True
        assert result.count == 0
        assert result.customers == []

    def test_backend_failure(self) -> None:
        result = CustomerService(lambda: _BrokenStore()).list_customers()

        assert result.success is False
        assert result.error == "getaddrinfo ENOTFOUND"
        assert result.customers == []


class TestSearch:
    """Tests for CustomerService.search."""

    def test_blank_term_returns_all(self, service: CustomerService) -> None:
        assert service.search("  ").count == 3

    def test_name_case_insensitive(self, service: CustomerService) -> None:
        result = service.search("carla")

        assert [c.full_name for c in result.customers] == ["Carla Souza"]
        assert result.message == "1 cliente(s) encontrado(s)"

    def test_email_and_code(self, service: CustomerService) -> None:
        assert service.search("DIEGO@").count == 1
        assert service.search("cust000002").customers[0].full_name == "Carla Souza"

    def test_phone(self, service: CustomerService) -> None:
        assert service.search("98888-7777").count == 3

    def test_no_match(self, service: CustomerService) -> None:
        result = service.search("zzz")

        assert result.success is True
        assert result.count == 0


class TestUpdate:
    """Tests for CustomerService.update."""

    def test_updates_present_fields_only(self, service: CustomerService, store: InMemoryRecordStore) -> None:
        result = service.update(2, CustomerUpdate(phone="1144445555", is_completed=False))

        assert result.success is True
        assert result.customer_id == 2
        row = store.snapshot()[1]
        assert row["Telefone"] == "(11) 4444-5555"
        assert row["Realizado"] == "N"
        assert row["Nome"] == "Carla Souza"
        assert row["Data de Registro"] == "01/02/2024"

    def test_not_found_mutates_nothing(self, service: CustomerService, store: InMemoryRecordStore) -> None:
        before = store.snapshot()

        result = service.update(7, CustomerUpdate(phone="1144445555"))

        assert result.success is False
        assert "não encontrado" in result.error
        assert store.snapshot() == before

    def test_invalid_field_rejected_before_write(
        self, service: CustomerService, store: InMemoryRecordStore
    ) -> None:
        before = store.snapshot()

        result = service.update(1, CustomerUpdate(email="bad"))

        assert result.success is False
        assert result.field == "email"
        assert store.snapshot() == before

    def test_clearing_optional_cep(self, service: CustomerService, store: InMemoryRecordStore) -> None:
        assert service.update(1, CustomerUpdate(zip_code="")).success is True

        assert store.snapshot()[0]["CEP"] == ""

    def test_update_row_located_by_position(self) -> None:
        store = InMemoryRecordStore([make_row(1, "A B"), make_row("", "C D")])
        service = CustomerService(lambda: store)

        assert service.update(2, CustomerUpdate(city="Recife")).success is True
        assert store.snapshot()[1]["Cidade"] == "Recife"

    def test_backend_failure(self) -> None:
        result = CustomerService(lambda: _BrokenStore()).update(1, CustomerUpdate(city="Recife"))

        assert result.success is False
        assert result.error == "getaddrinfo ENOTFOUND"

    def test_empty_update_writes_nothing(self, store: InMemoryRecordStore) -> None:
        sink = MagicMock()
        service = CustomerService(lambda: store, event_sink=sink)
        before = store.snapshot()

        result = service.update(2, CustomerUpdate())

        assert result.success is True
        assert store.snapshot() == before
        sink.publish.assert_not_called()

    def test_empty_update_of_missing_customer(self, service: CustomerService) -> None:
        result = service.update(42, CustomerUpdate())

        assert result.success is False
        assert result.error == "Cliente com ID 42 não encontrado"


class TestDelete:
    """Tests for CustomerService.delete."""

    def test_deletes_exactly_one_row(self, service: CustomerService, store: InMemoryRecordStore) -> None:
        result = service.delete(3)

        assert result.success is True
        assert result.deleted_name == "Diego Lima"
        assert "Diego Lima" in result.message
        assert store.row_count == 2
        assert [r["ID"] for r in store.snapshot()] == ["1", "2"]

    def test_not_found(self, service: CustomerService, store: InMemoryRecordStore) -> None:
        result = service.delete(99)

        assert result.success is False
        assert result.error == "Cliente com ID 99 não encontrado"
        assert store.row_count == 3

    def test_backend_failure(self) -> None:
        result = CustomerService(lambda: _BrokenStore()).delete(1)

        assert result.success is False


class TestCheckConnection:
    """Tests for CustomerService.check_connection."""

    def test_reports_layout(self, service: CustomerService) -> None:
        result = service.check_connection()

        assert result.success is True
        assert result.title == "Cadastro de Clientes"
        assert result.row_count == 3
        assert result.headers == list(HEADERS)
        assert result.missing_headers == []

    def test_reports_missing_headers(self) -> None:
        store = InMemoryRecordStore(headers=["ID", "Nome", "Email"])

        result = CustomerService(lambda: store).check_connection()

        assert result.success is True
        assert "Telefone" in result.missing_headers
        assert "ID" not in result.missing_headers

    def test_configuration_error(self) -> None:
        def factory() -> InMemoryRecordStore:
            raise ConfigurationError("POSTGRES_DB não está definido")

        result = CustomerService(factory).check_connection()

        assert result.success is False
        assert result.error == "POSTGRES_DB não está definido"


class TestEvents:
    """Tests for lifecycle event publishing."""

    def test_events_for_each_write(self, store: InMemoryRecordStore) -> None:
        sink = MagicMock()
        service = CustomerService(lambda: store, event_sink=sink)

        registered = service.register(_registration())
        service.update(registered.customer_id, CustomerUpdate(city="Recife"))
        service.delete(registered.customer_id)

        events = [call.args[0] for call in sink.publish.call_args_list]
        assert [e.event_type for e in events] == ["customer.registered", "customer.updated", "customer.deleted"]
        assert all(isinstance(e, Event) for e in events)
        assert {e.subject for e in events} == {"4"}
        assert events[0].data["phone"] == "(11) 99999-8888"
        assert events[1].data == {"city": "Recife"}

    def test_no_event_on_failure(self, store: InMemoryRecordStore) -> None:
        sink = MagicMock()
        service = CustomerService(lambda: store, event_sink=sink)

        service.register(_registration(email="bad"))
        service.delete(99)

        sink.publish.assert_not_called()

    def test_sink_failure_does_not_fail_write(self, store: InMemoryRecordStore) -> None:
        sink = MagicMock()
        sink.publish.side_effect = SinkError("queue full")
        service = CustomerService(lambda: store, event_sink=sink)

        result = service.register(_registration())

        assert result.success is True
        assert store.row_count == 4

    def test_from_config_without_kafka(self) -> None:
        service = CustomerService.from_config(IntakeConfig(kafka=KafkaConfig(enabled=False)))

        assert service.register(_registration()).customer_id == 1
        assert service.list_customers().count == 1


class TestResultSerialization:
    """Tests for result to_dict."""

    def test_list_result_to_dict(self, service: CustomerService) -> None:
        data = service.list_customers().to_dict()

        assert data["success"] is True
        assert data["count"] == 3
        assert data["customers"][1]["full_name"] == "Carla Souza"
        assert data["customers"][1]["is_completed"] is True


class TestServiceLifecycle:
    """Tests for closing the service and its event sink."""

    def test_close_closes_sink(self, store: InMemoryRecordStore) -> None:
        sink = MagicMock()

        CustomerService(lambda: store, event_sink=sink).close()

        sink.close.assert_called_once()

    def test_context_manager_closes_sink(self, store: InMemoryRecordStore) -> None:
        sink = MagicMock()

        with CustomerService(lambda: store, event_sink=sink) as service:
            service.register(_registration())
            sink.close.assert_not_called()

        sink.close.assert_called_once()

    def test_close_without_sink(self, service: CustomerService) -> None:
        service.close()

    @patch("customer_intake.sinks.kafka.Producer")
    def test_kafka_events_flushed_on_exit(self, mock_producer_class: MagicMock) -> None:
        producer = mock_producer_class.return_value
        config = IntakeConfig(kafka=KafkaConfig(enabled=True))

        with CustomerService.from_config(config) as service:
            service.register(_registration())
            producer.flush.assert_not_called()

        producer.produce.assert_called_once()
        producer.flush.assert_called_once()


class TestLogContext:
    """Tests for the context attached to service log records."""

    def test_validation_failure_context(self, service: CustomerService, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="customer_intake")

        service.register(_registration(email="bad", customer_code="CUST000111222"))

        record = next(r for r in caplog.records if r.levelno == logging.WARNING)
        assert record.operation == "register"
        assert record.field == "email"
        assert record.customer_code == "CUST000111222"

    def test_not_found_context(self, service: CustomerService, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="customer_intake")

        service.delete(7)

        record = next(r for r in caplog.records if r.levelno == logging.WARNING)
        assert record.operation == "delete"
        assert record.customer_id == 7
        assert not hasattr(record, "field")

    def test_success_context(self, service: CustomerService, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="customer_intake")

        service.update(1, CustomerUpdate(city="Recife"))

        assert any(
            getattr(r, "operation", None) == "update" and getattr(r, "customer_id", None) == 1
            for r in caplog.records
        )
