#!/usr/bin/env python3
"""Run the goods-return notification once with console transports."""

from __future__ import annotations

import argparse
import json
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
    OperationError,
    PhraseCatalog,
    do_return_operation,
    parse_request_payload,
    send_messages_via_console,
    send_sms_via_console,
)

DEFAULT_DIRECTORY = Path(__file__).resolve().parent / "sample_directory.json"


def main() -> int:
    args = parse_args()
    directory = InMemoryDirectory.from_json_file(args.directory_file)
    phrases = PhraseCatalog()
    ports = NotificationPorts(
        lookup_entity=directory.lookup_entity,
        render_phrase=phrases.render,
        reseller_email_from=directory.reseller_email_from,
        permitted_emails=directory.permitted_emails,
        send_messages=send_messages_via_console,
        send_sms=send_sms_via_console,
    )

    request = parse_request_payload(load_payload(args.payload_file))
    try:
        result = do_return_operation(request, ports)
    except OperationError as exc:
        print(f"[FAILED] status_code={exc.status_code} category={exc.category} error={exc.message}")
        return 1

    print("")
    print("[SUMMARY]")
    print(json.dumps(result, indent=2))
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Execute the goods-return status notification with a sample payload."
    )
    parser.add_argument(
        "--payload-file",
        type=Path,
        default=None,
        help="Optional JSON file with the request (`data` wrapper optional).",
    )
    parser.add_argument(
        "--directory-file",
        type=Path,
        default=DEFAULT_DIRECTORY,
        help="JSON directory of sellers, contractors and employees.",
    )
    return parser.parse_args()


def load_payload(payload_file: Path | None) -> dict[str, Any]:
    if payload_file is None:
        return sample_payload()
    with payload_file.open("r", encoding="utf-8") as file_handle:
        return json.load(file_handle)


def sample_payload() -> dict[str, Any]:
    return {
        "data": {
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
    }


if __name__ == "__main__":
    sys.exit(main())
