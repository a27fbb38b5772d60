"""Kafka transport adapters for goods-return status events.

Mental model refresher:
- This module is transport glue to Kafka itself.
- It maps Kafka records into the consumer-handler adapter flow.
- Offsets are committed manually: after processing, or after a rejected
  record has been written to the dead-letter topic.
- Business/channel logic still lives in domain/application layers.
"""

from __future__ import annotations

from datetime import UTC, datetime
import json
import os
from typing import Any, Callable, Mapping

from ..application.ports import NotificationPorts
from .consumer_handler import handle_message
from .wiring import build_ports_from_env

DEFAULT_TOPIC = "complaints.return_status"


def publish_return_status_event(
    payload: Mapping[str, Any],
    *,
    topic: str | None = None,
) -> dict[str, Any]:
    """Publish one goods-return status event to Kafka."""
    _KafkaConsumer, KafkaProducer, _TopicPartition, _OffsetAndMetadata = _import_kafka_python()
    send_timeout_seconds = float(os.getenv("KAFKA_SEND_TIMEOUT_SECONDS", "10"))

    producer = _build_producer(KafkaProducer)
    try:
        future = producer.send(topic or _topic_from_env(), value=dict(payload))
        metadata = future.get(timeout=send_timeout_seconds)
        producer.flush(timeout=send_timeout_seconds)
    finally:
        producer.close()

    return {
        "topic": metadata.topic,
        "partition": metadata.partition,
        "offset": metadata.offset,
    }


def run_return_worker_forever(ports: NotificationPorts | None = None) -> int:
    """Run the Kafka consumer loop for goods-return status notifications."""
    KafkaConsumer, KafkaProducer, TopicPartition, OffsetAndMetadata = _import_kafka_python()
    ports = ports or build_ports_from_env()
    topic_name = _topic_from_env()
    dlq_enabled = _env_bool("KAFKA_DLQ_ENABLED", default=True)
    dlq_topic = os.getenv("KAFKA_TOPIC_RETURN_STATUS_DLQ", f"{topic_name}.dlq")
    group_id = os.getenv("KAFKA_GROUP_ID", "return-notifications-worker")
    poll_timeout_ms = _poll_timeout_ms_from_env()
    max_records = int(os.getenv("KAFKA_MAX_RECORDS_PER_POLL", "50"))
    dlq_send_timeout_seconds = float(
        os.getenv(
            "KAFKA_DLQ_SEND_TIMEOUT_SECONDS",
            os.getenv("KAFKA_SEND_TIMEOUT_SECONDS", "10"),
        )
    )

    consumer = KafkaConsumer(
        topic_name,
        bootstrap_servers=_bootstrap_servers_from_env(),
        group_id=group_id,
        enable_auto_commit=False,
        auto_offset_reset=os.getenv("KAFKA_AUTO_OFFSET_RESET", "earliest"),
    )
    dlq_producer = _build_producer(KafkaProducer) if dlq_enabled else None
    print(
        f"[WORKER START] topic={topic_name} group_id={group_id} "
        f"dlq_enabled={dlq_enabled} dlq_topic={dlq_topic}"
    )

    try:
        while True:
            batches = consumer.poll(timeout_ms=poll_timeout_ms, max_records=max_records)
            for records in batches.values():
                for message in records:
                    _process_kafka_message(
                        message,
                        ports=ports,
                        commit=lambda m=message: _commit_offset(
                            consumer, TopicPartition, OffsetAndMetadata, m
                        ),
                        dead_letter=lambda reason, source_payload, m=message: _publish_to_dlq(
                            dlq_producer,
                            dlq_topic,
                            m,
                            reason=reason,
                            source_payload=source_payload,
                            timeout_seconds=dlq_send_timeout_seconds,
                        ),
                    )
    except KeyboardInterrupt:
        print("[WORKER STOP] received keyboard interrupt")
        return 0
    except Exception as exc:
        print(f"[WORKER ERROR] {exc}")
        return 1
    finally:
        _close_quietly(consumer, dlq_producer, dlq_send_timeout_seconds)


def _process_kafka_message(
    message: Any,
    *,
    ports: NotificationPorts,
    commit: Callable[[], None],
    dead_letter: Callable[[str, Any], bool],
) -> None:
    location = f"topic={message.topic} partition={message.partition} offset={message.offset}"

    def reject(reason: str, source_payload: Any) -> None:
        if dead_letter(reason, source_payload):
            commit()
        else:
            print(f"[NO-COMMIT] {location} reason={reason}")

    try:
        payload = _decode_record_value(message.value)
    except ValueError as exc:
        reject(f"decode_failed: {exc}", message.value)
        return

    record = {
        "topic": message.topic,
        "partition": int(message.partition),
        "offset": int(message.offset),
        "value": payload,
    }
    result = handle_message(
        record,
        ports=ports,
        commit=lambda _record: commit(),
        reject=lambda _record, reason: reject(reason, _record.get("value")),
    )
    print(
        f"[RESULT] {location} status={result['status']} "
        f"notification={result['notification']} error={result['error']}"
    )


def _commit_offset(consumer: Any, topic_partition_type: Any, offset_type: Any, message: Any) -> None:
    partition = int(message.partition)
    offset = int(message.offset)
    # kafka-python >= 2.0.2 takes (offset, metadata, leader_epoch).
    next_offset = offset_type(offset + 1, "", -1)
    consumer.commit(offsets={topic_partition_type(message.topic, partition): next_offset})
    print(f"[COMMIT] topic={message.topic} partition={partition} offset={offset}")


def _publish_to_dlq(
    producer: Any,
    dlq_topic: str,
    message: Any,
    *,
    reason: str,
    source_payload: Any,
    timeout_seconds: float,
) -> bool:
    if producer is None:
        return False

    dlq_payload = _build_dlq_payload(
        source_topic=message.topic,
        source_partition=int(message.partition),
        source_offset=int(message.offset),
        source_payload=source_payload,
        failure_reason=reason,
    )
    try:
        metadata = producer.send(dlq_topic, value=dlq_payload).get(timeout=timeout_seconds)
    except Exception as exc:
        print(
            f"[DLQ ERROR] source_topic={message.topic} source_offset={message.offset} "
            f"reason={reason} error={exc}"
        )
        return False

    print(
        f"[DLQ] source_topic={message.topic} source_offset={message.offset} "
        f"dlq_topic={metadata.topic} dlq_offset={metadata.offset} reason={reason}"
    )
    return True


def _close_quietly(consumer: Any, producer: Any, timeout_seconds: float) -> None:
    try:
        consumer.close()
    except Exception as exc:
        print(f"[WORKER ERROR] consumer close failed: {exc}")
    if producer is None:
        return
    try:
        producer.flush(timeout=timeout_seconds)
        producer.close()
    except Exception as exc:
        print(f"[WORKER ERROR] dlq producer close failed: {exc}")


def _import_kafka_python() -> tuple[Any, Any, Any, Any]:
    try:
        from kafka import KafkaConsumer, KafkaProducer, TopicPartition
        from kafka.structs import OffsetAndMetadata
    except ImportError as exc:
        raise RuntimeError(
            "Kafka support requires `kafka-python`. Install with: pip install kafka-python"
        ) from exc
    return KafkaConsumer, KafkaProducer, TopicPartition, OffsetAndMetadata


def _build_producer(producer_type: Any) -> Any:
    return producer_type(
        bootstrap_servers=_bootstrap_servers_from_env(),
        value_serializer=_serialize_json_object,
        acks=os.getenv("KAFKA_PRODUCER_ACKS", "all"),
    )


def _topic_from_env() -> str:
    return os.getenv("KAFKA_TOPIC_RETURN_STATUS", DEFAULT_TOPIC)


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value.strip()


def _bootstrap_servers_from_env() -> list[str]:
    raw = _required_env("KAFKA_BOOTSTRAP_SERVERS")
    servers = [item.strip() for item in raw.split(",") if item.strip()]
    if not servers:
        raise RuntimeError("KAFKA_BOOTSTRAP_SERVERS must include at least one host:port")
    return servers


def _poll_timeout_ms_from_env() -> int:
    timeout_ms = int(float(os.getenv("KAFKA_POLL_TIMEOUT_SECONDS", "1.0")) * 1000)
    if timeout_ms <= 0:
        raise RuntimeError("KAFKA_POLL_TIMEOUT_SECONDS must be > 0")
    return timeout_ms


def _serialize_json_object(payload: Mapping[str, Any]) -> bytes:
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def _decode_record_value(raw: bytes | str) -> dict[str, Any]:
    if not isinstance(raw, (bytes, str)):
        raise ValueError(f"Unsupported Kafka payload type: {type(raw).__name__}")
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        raise ValueError("Kafka payload must decode to a JSON object")
    return parsed


def _build_dlq_payload(
    *,
    source_topic: str,
    source_partition: int,
    source_offset: int,
    source_payload: Any,
    failure_reason: str,
) -> dict[str, Any]:
    # Undecodable records are forwarded as text so the DLQ stays JSON.
    if isinstance(source_payload, bytes):
        source_payload = source_payload.decode("utf-8", errors="replace")

    payload = {
        "event_type": f"{source_topic}.dlq",
        "failed_at": datetime.now(tz=UTC).isoformat(),
        "failure_reason": failure_reason,
        "source": {
            "topic": source_topic,
            "partition": source_partition,
            "offset": source_offset,
        },
        "payload": source_payload,
    }

    if isinstance(source_payload, Mapping):
        event_id = source_payload.get("event_id")
        if isinstance(event_id, str) and event_id.strip():
            payload["source_event_id"] = event_id.strip()

    return payload


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}: {raw!r}")
