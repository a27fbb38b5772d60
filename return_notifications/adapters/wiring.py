"""Build production ports from environment-variable config."""

from __future__ import annotations

import os

from ..application.ports import NotificationPorts
from .directory import InMemoryDirectory
from .phrases import PhraseCatalog
from .real_senders import TwilioSmsNotifier, send_messages_via_mailgun_from_env


def build_ports_from_env() -> NotificationPorts:
    """Wire the directory file, phrase catalog, Mailgun and Twilio together."""
    directory_file = os.getenv("RETURN_DIRECTORY_FILE", "").strip()
    if not directory_file:
        raise RuntimeError("Missing required environment variable: RETURN_DIRECTORY_FILE")

    directory = InMemoryDirectory.from_json_file(directory_file)
    phrases = PhraseCatalog()
    return NotificationPorts(
        lookup_entity=directory.lookup_entity,
        render_phrase=phrases.render,
        reseller_email_from=directory.reseller_email_from,
        permitted_emails=directory.permitted_emails,
        send_messages=send_messages_via_mailgun_from_env,
        send_sms=TwilioSmsNotifier(
            lookup_entity=directory.lookup_entity,
            render_phrase=phrases.render,
        ),
    )
