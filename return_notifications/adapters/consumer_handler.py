"""Consumer-handler adapter functions (Kafka-like flow without Kafka).

Mental model refresher:
- This is the controller-like entrypoint for event processing.
- Real Kafka code calls this after polling a record.
- Flow:
  record -> payload adapter -> return-notification use-case -> commit/reject
- This module owns transport lifecycle behavior (parse errors, commit
  callbacks), not channel business rules.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from ..application.ports import NotificationPorts
from ..application.process import do_return_operation
from ..errors import OperationError
from ..types import RequestDict
from .payload import parse_request_payload

Record = Mapping[str, Any]
CommitFn = Callable[[Record], None]
RejectFn = Callable[[Record, str], None]


def handle_message(
    record: Record,
    *,
    ports: NotificationPorts,
    commit: CommitFn,
    reject: RejectFn | None = None,
) -> dict[str, Any]:
    """Handle one incoming record and decide commit/reject.

    Commit policy:
    - Commit once the operation has run, whatever the per-channel outcome;
      channel failures are already part of the notification result.
    - Reject on parse failures and on operation errors (bad request or
      internal), so the record can be dead-lettered.
    """
    try:
        payload = _get_record_payload(record)
        request = parse_request_payload(payload)
    except (TypeError, ValueError) as exc:
        error = f"parse_failed: {exc}"
        if reject is not None:
            reject(record, error)
        return _handler_result(record, status="parse_failed", error=error)

    try:
        notification = do_return_operation(request, ports)
    except OperationError as exc:
        error = f"{exc.category}: {exc.message}"
        if reject is not None:
            reject(record, error)
        return _handler_result(
            record,
            status=f"rejected_{exc.category}",
            event_id=_event_id(payload),
            error=error,
        )

    commit(record)
    return _handler_result(
        record,
        status="processed_and_committed",
        event_id=_event_id(payload),
        notification=notification,
        should_commit=True,
    )


def handle_batch(
    records: Sequence[Record],
    *,
    ports: NotificationPorts,
    commit: CommitFn,
    reject: RejectFn | None = None,
) -> list[dict[str, Any]]:
    """Handle a batch of records sequentially using `handle_message`."""
    return [
        handle_message(record, ports=ports, commit=commit, reject=reject)
        for record in records
    ]


def _get_record_payload(record: Record) -> RequestDict:
    payload = record.get("value")
    if not isinstance(payload, dict):
        raise ValueError("record.value must be a dict payload")
    return payload


def _event_id(payload: Mapping[str, Any]) -> str | None:
    event_id = payload.get("event_id")
    return str(event_id) if event_id is not None else None


def _handler_result(
    record: Record,
    *,
    status: str,
    event_id: str | None = None,
    notification: dict[str, Any] | None = None,
    should_commit: bool = False,
    error: str | None = None,
) -> dict[str, Any]:
    return {
        "status": status,
        "record_meta": {
            "topic": record.get("topic"),
            "partition": record.get("partition"),
            "offset": record.get("offset"),
        },
        "event_id": event_id,
        "notification": notification,
        "should_commit": should_commit,
        "error": error,
    }
