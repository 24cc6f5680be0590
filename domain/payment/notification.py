"""
IPN notification payload.

PayPal posts the notification as a form-encoded body. The payload is parsed
exactly once into an immutable, case-insensitive field mapping; values are
kept as received (no URL decoding) so they match what PayPal signed.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterator, Mapping
from typing import Optional

from domain.common.exceptions import MalformedNotificationException


class NotificationPayload(Mapping[str, str]):
    """Read-only mapping of notification fields with case-insensitive keys.

    Iteration yields the keys with their original casing, in the order
    PayPal sent them.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, str] | None = None) -> None:
        # lowercased key -> (original key, value)
        self._items: dict[str, tuple[str, str]] = {}
        for key, value in (items or {}).items():
            self._insert(key, value)

    def _insert(self, key: str, value: str) -> None:
        folded = key.casefold()
        if folded in self._items:
            raise MalformedNotificationException(
                f"Duplicate field in notification: {key}", field=key
            )
        self._items[folded] = (key, value)

    def __getitem__(self, key: str) -> str:
        return self._items[key.casefold()][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._items

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"NotificationPayload({dict(self.items())!r})"


def parse_notification(raw: str) -> NotificationPayload:
    """Parse a raw ``key=value&key2=value2`` body.

    Segments without ``=`` are dropped. A repeated key fails the whole parse
    with MalformedNotificationException.
    """
    payload = NotificationPayload()
    for segment in raw.split("&"):
        line = segment.strip()
        key, sep, value = line.partition("=")
        if not sep:
            continue
        payload._insert(key, value)
    return payload


def parse_guid(value: Optional[str]) -> Optional[uuid.UUID]:
    """Parse an order GUID, returning None when it is missing or malformed."""
    if not value:
        return None
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        return None
