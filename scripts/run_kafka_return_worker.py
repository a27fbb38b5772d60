#!/usr/bin/env python3
"""Run the Kafka goods-return notification worker.

Consumes complaint status events, sends employee mail via Mailgun and client
SMS via Twilio. Entities come from the JSON file named by
`RETURN_DIRECTORY_FILE`.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from return_notifications.adapters.kafka_runtime import run_return_worker_forever  # noqa: E402
from scripts._env import load_env_file  # noqa: E402


def main() -> int:
    parse_args()
    load_env_file(REPO_ROOT / ".env")
    return run_return_worker_forever()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run Kafka consumer loop for goods-return status notifications."
    )
    return parser.parse_args()


if __name__ == "__main__":
    sys.exit(main())
