"""Shared type aliases for the goods-return notification package."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

Request = Mapping[str, Any]
RequestDict = dict[str, Any]
TemplateData = dict[str, Any]
EmailMessage = dict[str, str]
ChannelResult = dict[str, Any]
NotificationResult = dict[str, Any]

LookupEntityFn = Callable[[str, int], Any]
RenderPhraseFn = Callable[[str, Mapping[str, Any] | None, int], str]
StatusNameFn = Callable[[int], str]
ResellerEmailFromFn = Callable[[int], str]
PermittedEmailsFn = Callable[[int, str], Sequence[str]]

SendMessagesFn = Callable[..., None]
SendSMSFn = Callable[..., tuple[bool, str]]
