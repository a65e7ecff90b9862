"""Enumeration types for intake form options."""

from enum import Enum


class CompletionMarker(str, Enum):
    """Single-character cell encoding of the completion flag."""

    DONE = "S"
    PENDING = "N"

    @classmethod
    def encode(cls, is_completed: bool) -> str:
        return (cls.DONE if is_completed else cls.PENDING).value

    @classmethod
    def decode(cls, cell: str | None) -> bool:
        # Only the exact "S" token counts as completed
        return cell == cls.DONE.value


class AcquisitionSource(str, Enum):
    APP = "app"
    WEBSITE = "website"
    REFERRAL = "referral"
    SOCIAL_MEDIA = "social-media"
    ADVERTISING = "advertising"
    WALK_IN = "walk-in"
    PHONE = "phone"
    WHATSAPP = "whatsapp"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _ACQUISITION_LABELS[self]


class ServiceType(str, Enum):
    CONSULTATION = "consultation"
    INSTALLATION = "installation"
    MAINTENANCE = "maintenance"
    REPAIR = "repair"
    SUPPORT = "support"
    TRAINING = "training"
    DELIVERY = "delivery"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _SERVICE_LABELS[self]


class BrazilianState(str, Enum):
    AC = "ac"
    AL = "al"
    AP = "ap"
    AM = "am"
    BA = "ba"
    CE = "ce"
    DF = "df"
    ES = "es"
    GO = "go"
    MA = "ma"
    MT = "mt"
    MS = "ms"
    MG = "mg"
    PA = "pa"
    PB = "pb"
    PR = "pr"
    PE = "pe"
    PI = "pi"
    RJ = "rj"
    RN = "rn"
    RS = "rs"
    RO = "ro"
    RR = "rr"
    SC = "sc"
    SP = "sp"
    SE = "se"
    TO = "to"

    @property
    def label(self) -> str:
        return _STATE_LABELS[self]


_ACQUISITION_LABELS = {
    AcquisitionSource.APP: "Aplicativo Mobile",
    AcquisitionSource.WEBSITE: "Site",
    AcquisitionSource.REFERRAL: "Indicação",
    AcquisitionSource.SOCIAL_MEDIA: "Redes Sociais",
    AcquisitionSource.ADVERTISING: "Publicidade",
    AcquisitionSource.WALK_IN: "Visita Presencial",
    AcquisitionSource.PHONE: "Ligação Telefônica",
    AcquisitionSource.WHATSAPP: "WhatsApp",
    AcquisitionSource.OTHER: "Outros",
}

_SERVICE_LABELS = {
    ServiceType.CONSULTATION: "Consultoria",
    ServiceType.INSTALLATION: "Instalação",
    ServiceType.MAINTENANCE: "Manutenção",
    ServiceType.REPAIR: "Reparo",
    ServiceType.SUPPORT: "Suporte Técnico",
    ServiceType.TRAINING: "Treinamento",
    ServiceType.DELIVERY: "Entrega",
    ServiceType.OTHER: "Outros",
}

_STATE_LABELS = {
    BrazilianState.AC: "Acre",
    BrazilianState.AL: "Alagoas",
    BrazilianState.AP: "Amapá",
    BrazilianState.AM: "Amazonas",
    BrazilianState.BA: "Bahia",
    BrazilianState.CE: "Ceará",
    BrazilianState.DF: "Distrito Federal",
    BrazilianState.ES: "Espírito Santo",
    BrazilianState.GO: "Goiás",
    BrazilianState.MA: "Maranhão",
    BrazilianState.MT: "Mato Grosso",
    BrazilianState.MS: "Mato Grosso do Sul",
    BrazilianState.MG: "Minas Gerais",
    BrazilianState.PA: "Pará",
    BrazilianState.PB: "Paraíba",
    BrazilianState.PR: "Paraná",
    BrazilianState.PE: "Pernambuco",
    BrazilianState.PI: "Piauí",
    BrazilianState.RJ: "Rio de Janeiro",
    BrazilianState.RN: "Rio Grande do Norte",
    BrazilianState.RS: "Rio Grande do Sul",
    BrazilianState.RO: "Rondônia",
    BrazilianState.RR: "Roraima",
    BrazilianState.SC: "Santa Catarina",
    BrazilianState.SP: "São Paulo",
    BrazilianState.SE: "Sergipe",
    BrazilianState.TO: "Tocantins",
}


def form_options() -> dict[str, list[dict[str, str]]]:
    """Return the select-box catalogs offered by the intake form."""
    return {
        "acquisition_source": [{"value": o.value, "label": o.label} for o in AcquisitionSource],
        "service_type": [{"value": o.value, "label": o.label} for o in ServiceType],
        "state": [{"value": o.value, "label": o.label} for o in BrazilianState],
    }
