"""Tests for domain models and option catalogs."""

from customer_intake.models import (
    AcquisitionSource,
    BrazilianState,
    CompletionMarker,
    CustomerRecord,
    CustomerRegistration,
    CustomerUpdate,
    form_options,
)


class TestCustomerRecord:
    """Tests for CustomerRecord."""

    def test_optional_fields_default_empty(self) -> None:
        record = CustomerRecord(
            id=1,
            customer_code="CUST123456789",
            full_name="Ana Silva",
            email="ana@x.com",
            phone="(11) 99999-8888",
        )

        assert record.address == ""
        assert record.zip_code == ""
        assert record.is_completed is False
        assert record.registration_date == ""


class TestCustomerRegistration:
    """Tests for CustomerRegistration."""

    def test_defaults(self) -> None:
        data = CustomerRegistration(full_name="Ana Silva", email="ana@x.com", phone="11999998888")

        assert data.customer_code == ""
        assert data.is_completed is False
        assert data.observations == ""


class TestCustomerUpdate:
    """Tests for CustomerUpdate."""

    def test_empty_update(self) -> None:
        update = CustomerUpdate()

        assert update.present_fields() == {}
        assert update.is_empty() is True

    def test_present_fields_only(self) -> None:
        update = CustomerUpdate(phone="1144445555", is_completed=False, observations="")

        assert update.present_fields() == {
            "phone": "1144445555",
            "is_completed": False,
            "observations": "",
        }
        assert update.is_empty() is False


class TestCompletionMarker:
    """Tests for the S/N completion encoding."""

    def test_encode(self) -> None:
        assert CompletionMarker.encode(True) == "S"
        assert CompletionMarker.encode(False) == "N"

    def test_decode_only_exact_s(self) -> None:
        assert CompletionMarker.decode("S") is True
        assert CompletionMarker.decode("N") is False
        assert CompletionMarker.decode("") is False
        assert CompletionMarker.decode(None) is False
        assert CompletionMarker.decode("s") is False
        assert CompletionMarker.decode("Sim") is False


class TestCatalogs:
    """Tests for form option catalogs."""

    def test_all_federative_units(self) -> None:
        assert len(BrazilianState) == 27
        assert BrazilianState.SP.value == "sp"
        assert BrazilianState.SP.label == "São Paulo"

    def test_acquisition_labels(self) -> None:
        assert AcquisitionSource.WALK_IN.value == "walk-in"
        assert AcquisitionSource.WALK_IN.label == "Visita Presencial"

    def test_form_options(self) -> None:
        options = form_options()

        assert set(options) == {"acquisition_source", "service_type", "state"}
        assert {"value": "whatsapp", "label": "WhatsApp"} in options["acquisition_source"]
        assert {"value": "repair", "label": "Reparo"} in options["service_type"]
        assert len(options["state"]) == 27
