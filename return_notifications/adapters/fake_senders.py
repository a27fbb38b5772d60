"""Console sender adapters for local smoke tests.

Mental model refresher:
- This is outbound adapter code.
- In production, provider calls live in `real_senders`.
- Domain code calls these through injected functions; domain does not know which
  provider implementation is underneath.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence


def send_messages_via_console(
    messages: Sequence[Mapping[str, str]],
    *,
    reseller_id: int,
    client_id: int | None = None,
    event: str,
) -> None:
    for message in messages:
        print("[EMAIL]")
        print(f"reseller_id={reseller_id} client_id={client_id} event={event}")
        print(f"from={message['emailFrom']}")
        print(f"to={message['emailTo']}")
        print(f"subject={message['subject']}")
        print(f"body={message['message']}")


def send_sms_via_console(
    *,
    reseller_id: int,
    client_id: int,
    event: str,
    template_data: Mapping[str, Any],
) -> tuple[bool, str]:
    print("[SMS]")
    print(f"reseller_id={reseller_id} client_id={client_id} event={event}")
    print(f"complaint_number={template_data.get('COMPLAINT_NUMBER')}")
    print(f"differences={template_data.get('DIFFERENCES')}")
    return True, ""
