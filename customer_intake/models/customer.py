"""Customer intake entities."""

from dataclasses import dataclass, fields


@dataclass
class CustomerRecord:
    """A customer as stored in the intake table."""

    id: int
    customer_code: str
    full_name: str
    email: str
    phone: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    acquisition_source: str = ""
    service_type: str = ""
    is_completed: bool = False
    observations: str = ""
    registration_date: str = ""


@dataclass
class CustomerRegistration:
    """Payload submitted by the intake form.

    ``customer_code`` may be left empty; the service generates one.
    """

    full_name: str
    email: str
    phone: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    acquisition_source: str = ""
    service_type: str = ""
    is_completed: bool = False
    observations: str = ""
    customer_code: str = ""


@dataclass
class CustomerUpdate:
    """Partial update; ``None`` means the field is left as stored."""

    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    acquisition_source: str | None = None
    service_type: str | None = None
    is_completed: bool | None = None
    observations: str | None = None

    def present_fields(self) -> dict[str, str | bool]:
        """Return only the fields that carry a new value."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.present_fields()
