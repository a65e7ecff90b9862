"""Configuration management for customer-intake."""

import os
from dataclasses import dataclass, field
from typing import Any

from customer_intake.exceptions import ConfigurationError

STORE_BACKENDS = ("memory", "postgres")


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration.

    ``database``, ``user`` and ``password`` have no defaults: the store
    refuses to open until all three are provided.
    """

    host: str = "localhost"
    port: int = 5432
    database: str | None = None
    user: str | None = None
    password: str | None = None
    table: str = "cadastro_clientes"

    # Environment variable behind each required credential
    REQUIRED_ENV = {
        "database": "POSTGRES_DB",
        "user": "POSTGRES_USER",
        "password": "POSTGRES_PASSWORD",
    }

    def missing_credentials(self) -> list[str]:
        """Return the environment variable names of unset credentials."""
        return [env for attr, env in self.REQUIRED_ENV.items() if not getattr(self, attr)]

    def validate(self) -> None:
        """Raise ``ConfigurationError`` if a required credential is missing."""
        missing = self.missing_credentials()
        if len(missing) == 1:
            raise ConfigurationError(f"{missing[0]} não está definido")
        if missing:
            raise ConfigurationError(f"{', '.join(missing)} não estão definidos")

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        self.validate()
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"

    @classmethod
    def from_env(cls) -> "PostgresConfig":
        """Create config from environment variables."""
        return cls(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB") or None,
            user=os.getenv("POSTGRES_USER") or None,
            password=os.getenv("POSTGRES_PASSWORD") or None,
            table=os.getenv("POSTGRES_TABLE", "cadastro_clientes"),
        )


@dataclass
class KafkaConfig:
    """Kafka producer configuration for lifecycle events."""

    enabled: bool = False
    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    topic: str = "intake.customers"
    linger_ms: int = 5
    retries: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "retries": self.retries,
        }

    @classmethod
    def from_env(cls) -> "KafkaConfig":
        """Create config from environment variables."""
        return cls(
            enabled=os.getenv("KAFKA_ENABLED", "false").lower() == "true",
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic=os.getenv("KAFKA_TOPIC", "intake.customers"),
        )


@dataclass
class IntakeConfig:
    """Main configuration for customer-intake."""

    store_backend: str = "memory"
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    def __post_init__(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"Unknown store backend {self.store_backend!r}, expected one of {STORE_BACKENDS}"
            )

    @classmethod
    def from_env(cls) -> "IntakeConfig":
        """Create config from environment variables."""
        return cls(
            store_backend=os.getenv("STORE_BACKEND", "memory").lower(),
            postgres=PostgresConfig.from_env(),
            kafka=KafkaConfig.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
