"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from customer_intake.service import CustomerService
from customer_intake.store import InMemoryRecordStore


def make_row(customer_id: int | str, name: str, **cells: str) -> dict[str, str]:
    """Build a stored row keyed by column header."""
    row = {
        "ID": str(customer_id),
        "Código do cliente": f"CUST00000{customer_id}",
        "Nome": name,
        "Email": f"{name.split()[0].lower()}@exemplo.com",
        "Telefone": "(11) 98888-7777",
        "Endereço": "",
        "Cidade": "São Paulo",
        "Estado": "sp",
        "CEP": "01234-567",
        "Fonte de Aquisição": "website",
        "Tipo de Serviço": "repair",
        "Realizado": "N",
        "Observações": "",
        "Data de Registro": "01/02/2024",
    }
    row.update(cells)
    return row


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed clock value for registration dates."""
    return datetime(2024, 3, 5, 14, 30)


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Store holding three customers with IDs 1..3."""
    return InMemoryRecordStore(
        [
            make_row(1, "Bruno Costa"),
            make_row(2, "Carla Souza", **{"Realizado": "S"}),
            make_row(3, "Diego Lima"),
        ]
    )


@pytest.fixture
def service(store: InMemoryRecordStore, fixed_now: datetime) -> CustomerService:
    """Service wired to the shared in-memory store."""
    return CustomerService(lambda: store, clock=lambda: fixed_now)
