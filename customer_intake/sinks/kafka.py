"""Kafka sink for customer lifecycle events."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from customer_intake.config import KafkaConfig
from customer_intake.exceptions import SinkError
from customer_intake.models.base import Event
from customer_intake.sinks.serialization import to_dict

logger = logging.getLogger(__name__)

CLOUDEVENTS_SPEC_VERSION = "1.0"


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaEventSink:
    """Publish ``Event`` envelopes to a Kafka topic, keyed by subject."""

    def __init__(self, config: KafkaConfig) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig
            Producer configuration and target topic.
        """
        self.config = config
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats()

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _headers(self, event: Event) -> list[tuple[str, bytes]]:
        """CloudEvents binary-mode headers."""
        return [
            ("ce_specversion", CLOUDEVENTS_SPEC_VERSION.encode("utf-8")),
            ("ce_id", event.event_id.encode("utf-8")),
            ("ce_type", event.event_type.encode("utf-8")),
            ("ce_source", event.source.encode("utf-8")),
            ("ce_subject", event.subject.encode("utf-8")),
            ("ce_time", event.event_time.isoformat().encode("utf-8")),
            ("content-type", b"application/json"),
        ]

    def publish(self, event: Event) -> None:
        """Send one event to the configured topic."""
        value = json.dumps(to_dict(event), ensure_ascii=False, default=str).encode("utf-8")
        try:
            self.producer.produce(
                topic=self.config.topic,
                key=event.subject.encode("utf-8"),
                value=value,
                headers=self._headers(event),
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as e:
            raise SinkError(f"Could not publish {event.event_type}: {e}") from e
        self.stats.sent += 1
        self.producer.poll(0)

    def flush(self, timeout: float = 30.0) -> None:
        """Flush pending messages."""
        self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
