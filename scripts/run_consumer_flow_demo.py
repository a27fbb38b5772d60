#!/usr/bin/env python3
"""Run a Kafka-like consumer flow for return events without Kafka."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from return_notifications import (  # noqa: E402
    InMemoryDirectory,
    NotificationPorts,
    PhraseCatalog,
    handle_batch,
    send_messages_via_console,
    send_sms_via_console,
)

DIRECTORY_FILE = Path(__file__).resolve().parent / "sample_directory.json"


def main() -> int:
    directory = InMemoryDirectory.from_json_file(DIRECTORY_FILE)
    phrases = PhraseCatalog()
    ports = NotificationPorts(
        lookup_entity=directory.lookup_entity,
        render_phrase=phrases.render,
        reseller_email_from=directory.reseller_email_from,
        permitted_emails=directory.permitted_emails,
        send_messages=send_messages_via_console,
        send_sms=send_sms_maybe_fail,
    )
    committed_offsets: list[tuple[int, int]] = []
    rejected_offsets: list[tuple[int, int, str]] = []

    def commit(record: dict[str, Any]) -> None:
        partition = int(record.get("partition", -1))
        offset = int(record.get("offset", -1))
        committed_offsets.append((partition, offset))
        print(f"[COMMIT] partition={partition} offset={offset}")

    def reject(record: dict[str, Any], reason: str) -> None:
        partition = int(record.get("partition", -1))
        offset = int(record.get("offset", -1))
        rejected_offsets.append((partition, offset, reason))
        print(f"[NO-COMMIT] partition={partition} offset={offset} reason={reason}")

    results = handle_batch(sample_records(), ports=ports, commit=commit, reject=reject)

    print("")
    print("[BATCH SUMMARY]")
    for result in results:
        meta = result["record_meta"]
        print(
            f"offset={meta['offset']} status={result['status']} "
            f"notification={result['notification']} error={result['error']}"
        )

    print("")
    print("[OFFSETS]")
    print(f"committed={committed_offsets}")
    print(f"rejected={rejected_offsets}")
    return 0


def send_sms_maybe_fail(
    *,
    reseller_id: int,
    client_id: int,
    event: str,
    template_data: dict[str, Any],
) -> tuple[bool, str]:
    if template_data.get("COMPLAINT_NUMBER") == "CR-FAIL":
        return False, "sms provider unavailable"
    return send_sms_via_console(
        reseller_id=reseller_id,
        client_id=client_id,
        event=event,
        template_data=template_data,
    )


def make_data(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "resellerId": 5,
        "notificationType": 2,
        "clientId": 10,
        "creatorId": 20,
        "expertId": 21,
        "complaintId": 301,
        "complaintNumber": "CR-301",
        "consumptionId": 401,
        "consumptionNumber": "CN-401",
        "agreementNumber": "AG-77",
        "date": "2026-10-17",
        "differences": {"from": 1, "to": 2},
    }
    return base | overrides


def sample_records() -> list[dict[str, Any]]:
    return [
        {
            "topic": "complaints.return_status",
            "partition": 0,
            "offset": 100,
            "value": {"event_id": "evt-100", "data": make_data()},
        },
        {
            "topic": "complaints.return_status",
            "partition": 0,
            "offset": 101,
            "value": {"event_id": "evt-101", "data": make_data(notificationType=1, differences={})},
        },
        {
            "topic": "complaints.return_status",
            "partition": 0,
            "offset": 102,
            "value": {"event_id": "evt-102", "data": make_data(clientId=11)},
        },
        {
            "topic": "complaints.return_status",
            "partition": 0,
            "offset": 103,
            "value": {"event_id": "evt-103", "data": make_data(differences={})},
        },
        {
            "topic": "complaints.return_status",
            "partition": 0,
            "offset": 104,
            "value": {"event_id": "evt-104", "data": make_data(complaintNumber="CR-FAIL")},
        },
        {
            "topic": "complaints.return_status",
            "partition": 0,
            "offset": 105,
            "value": "not-a-dict",
        },
    ]


if __name__ == "__main__":
    sys.exit(main())
