"""Adapter layer: payload mapping, directory, phrases and sender implementations."""

from .consumer_handler import handle_batch, handle_message
from .directory import InMemoryDirectory
from .fake_senders import send_messages_via_console, send_sms_via_console
from .kafka_runtime import publish_return_status_event, run_return_worker_forever
from .payload import parse_request_payload
from .phrases import PhraseCatalog
from .real_senders import (
    TwilioSmsNotifier,
    send_messages_via_mailgun_from_env,
    send_sms_via_twilio_from_env,
)
from .wiring import build_ports_from_env

__all__ = [
    "InMemoryDirectory",
    "PhraseCatalog",
    "TwilioSmsNotifier",
    "build_ports_from_env",
    "handle_batch",
    "handle_message",
    "parse_request_payload",
    "publish_return_status_event",
    "run_return_worker_forever",
    "send_messages_via_console",
    "send_messages_via_mailgun_from_env",
    "send_sms_via_console",
    "send_sms_via_twilio_from_env",
]
