"""Output sinks for customer lifecycle events."""

from customer_intake.sinks.kafka import KafkaEventSink

__all__ = ["KafkaEventSink"]
