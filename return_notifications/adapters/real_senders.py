"""Real provider adapters for production-like sending.

Mental model refresher:
- This module is an outbound adapter.
- It integrates with external providers using environment-variable config.
- Domain/application code only sees the `send_messages` and `send_sms` ports.

Email goes through the Mailgun REST API, one request per message, using the
message's own `emailFrom` (reseller sender addresses differ per reseller).
SMS goes through the Twilio REST API; `TwilioSmsNotifier` resolves the
client's mobile number and renders the SMS body before posting.
"""

from __future__ import annotations

import base64
import os
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Callable, Mapping, Sequence

from ..domain.entities import EntityKind
from ..domain.values import is_empty
from ..types import LookupEntityFn, RenderPhraseFn


def send_messages_via_mailgun_from_env(
    messages: Sequence[Mapping[str, str]],
    *,
    reseller_id: int,
    client_id: int | None = None,
    event: str,
) -> None:
    """Send each message via Mailgun using environment-variable config."""
    api_key = _required_env("MAILGUN_API_KEY")
    domain = _required_env("MAILGUN_DOMAIN")
    base_url = os.getenv("MAILGUN_API_BASE_URL", "https://api.mailgun.net").rstrip("/")
    timeout_seconds = float(os.getenv("MAILGUN_TIMEOUT_SECONDS", "10"))

    encoded_domain = urllib.parse.quote(domain, safe="")
    endpoint = f"{base_url}/v3/{encoded_domain}/messages"

    for message in messages:
        fields = {
            "from": message["emailFrom"],
            "to": message["emailTo"],
            "subject": message["subject"],
            "text": message["message"],
            "o:tag": event,
            "v:reseller_id": str(reseller_id),
        }
        if client_id is not None:
            fields["v:client_id"] = str(client_id)
        _post_form(
            endpoint,
            fields,
            auth_header=_basic_auth_header("api", api_key),
            timeout_seconds=timeout_seconds,
            provider="Mailgun email send",
        )


def send_sms_via_twilio_from_env(*, to_phone_e164: str, message: str) -> None:
    """Send SMS via Twilio REST API using environment-variable config."""
    account_sid = _required_env("TWILIO_ACCOUNT_SID")
    auth_token = _required_env("TWILIO_AUTH_TOKEN")
    from_phone = _required_env("TWILIO_FROM_PHONE")
    base_url = os.getenv("TWILIO_API_BASE_URL", "https://api.twilio.com").rstrip("/")
    timeout_seconds = float(os.getenv("TWILIO_TIMEOUT_SECONDS", "10"))

    endpoint = f"{base_url}/2010-04-01/Accounts/{account_sid}/Messages.json"
    _post_form(
        endpoint,
        {"To": to_phone_e164, "From": from_phone, "Body": message},
        auth_header=_basic_auth_header(account_sid, auth_token),
        timeout_seconds=timeout_seconds,
        provider="Twilio SMS send",
    )


class TwilioSmsNotifier:
    """`send_sms` port backed by Twilio.

    Reports failures as `(False, error)` so the caller can surface the
    provider message in the notification result.
    """

    def __init__(
        self,
        *,
        lookup_entity: LookupEntityFn,
        render_phrase: RenderPhraseFn,
        send_sms: Callable[..., None] = send_sms_via_twilio_from_env,
    ) -> None:
        self._lookup_entity = lookup_entity
        self._render_phrase = render_phrase
        self._send_sms = send_sms

    def __call__(
        self,
        *,
        reseller_id: int,
        client_id: int,
        event: str,
        template_data: Mapping[str, Any],
    ) -> tuple[bool, str]:
        client = self._lookup_entity(EntityKind.CONTRACTOR, client_id)
        if client is None or is_empty(client.mobile):
            return False, f"Client {client_id} has no mobile number"

        message = self._render_phrase("complaintClientSmsBody", template_data, reseller_id)
        try:
            self._send_sms(to_phone_e164=client.mobile, message=message)
        except RuntimeError as exc:
            return False, str(exc)
        return True, ""


def _post_form(
    endpoint: str,
    fields: Mapping[str, str],
    *,
    auth_header: str,
    timeout_seconds: float,
    provider: str,
) -> None:
    payload = urllib.parse.urlencode(fields).encode("utf-8")
    request = urllib.request.Request(endpoint, data=payload, method="POST")
    request.add_header("Authorization", auth_header)
    request.add_header("Content-Type", "application/x-www-form-urlencoded")

    try:
        with urllib.request.urlopen(request, timeout=timeout_seconds) as response:
            status = int(response.getcode())
            if status < 200 or status >= 300:
                raise RuntimeError(f"{provider} failed with status {status}")
            response.read()
    except urllib.error.HTTPError as exc:
        details = exc.read().decode("utf-8", errors="replace")
        raise RuntimeError(f"{provider} failed HTTP {exc.code}: {details[:300]}") from exc
    except urllib.error.URLError as exc:
        raise RuntimeError(f"{provider} failed: {exc.reason}") from exc


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value.strip()


def _basic_auth_header(username: str, password: str) -> str:
    token = f"{username}:{password}".encode("utf-8")
    encoded = base64.b64encode(token).decode("ascii")
    return f"Basic {encoded}"
