#!/usr/bin/env python3
"""Publish one goods-return status event to Kafka for local testing."""

from __future__ import annotations

import argparse
import sys
import uuid
from datetime import UTC, datetime
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from return_notifications.adapters.kafka_runtime import publish_return_status_event  # noqa: E402
from scripts._env import load_env_file  # noqa: E402


def main() -> int:
    load_env_file(REPO_ROOT / ".env")
    args = parse_args()
    payload = build_payload(args)
    metadata = publish_return_status_event(payload, topic=args.topic)

    print("[PUBLISHED]")
    print(f"topic={metadata['topic']}")
    print(f"partition={metadata['partition']}")
    print(f"offset={metadata['offset']}")
    print(f"event_id={payload['event_id']}")
    print(f"notificationType={payload['data']['notificationType']}")
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Publish one goods-return status event for Kafka testing."
    )
    parser.add_argument("--reseller-id", type=int, required=True, help="Reseller id.")
    parser.add_argument("--client-id", type=int, required=True, help="Client contractor id.")
    parser.add_argument("--creator-id", type=int, required=True, help="Creator employee id.")
    parser.add_argument("--expert-id", type=int, required=True, help="Expert employee id.")
    parser.add_argument(
        "--new",
        action="store_true",
        help="Publish a new-position event (notificationType=1) instead of a status change.",
    )
    parser.add_argument("--status-from", type=int, default=1, help="Previous status code.")
    parser.add_argument("--status-to", type=int, default=2, help="New status code.")
    parser.add_argument(
        "--complaint-number",
        default=None,
        help="Complaint number. Default: generated from a UUID.",
    )
    parser.add_argument(
        "--topic",
        default=None,
        help="Override Kafka topic (defaults to KAFKA_TOPIC_RETURN_STATUS).",
    )
    return parser.parse_args()


def build_payload(args: argparse.Namespace) -> dict[str, object]:
    suffix = uuid.uuid4().hex[:8]
    data: dict[str, object] = {
        "resellerId": args.reseller_id,
        "notificationType": 1 if args.new else 2,
        "clientId": args.client_id,
        "creatorId": args.creator_id,
        "expertId": args.expert_id,
        "complaintId": int(suffix, 16),
        "complaintNumber": args.complaint_number or f"CR-{suffix}",
        "consumptionId": int(suffix[:4], 16) + 1,
        "consumptionNumber": f"CN-{suffix}",
        "agreementNumber": f"AG-{suffix}",
        "date": datetime.now(tz=UTC).date().isoformat(),
    }
    if not args.new:
        data["differences"] = {"from": args.status_from, "to": args.status_to}

    return {
        "event_id": f"evt-{uuid.uuid4()}",
        "occurred_at": datetime.now(tz=UTC).isoformat(),
        "data": data,
    }


if __name__ == "__main__":
    sys.exit(main())
