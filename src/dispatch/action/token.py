"""Courier action tokens embedded in assignment mails.

A token is the base64 encoding of ``"{order_id}|{action}"``. It is reversible
and carries no signature or expiry: it only keeps the order id out of plain
sight, and links already sitting in couriers' inboxes must keep working.
"""

import base64
import binascii
from enum import Enum
from urllib.parse import urlencode

SEPARATOR = "|"


class CourierAction(Enum):
    CONFIRM = "confirm"
    DISCARD = "discard"


class InvalidActionToken(ValueError):
    """The token does not decode to ``order_id|action`` with a known action."""


def encode_action_token(order_id: str, action: CourierAction | str) -> str:
    action = CourierAction(action)
    if not order_id or SEPARATOR in order_id:
        raise ValueError(f"Order id cannot be empty or contain {SEPARATOR!r}")
    raw = f"{order_id}{SEPARATOR}{action.value}".encode()
    return base64.b64encode(raw).decode("ascii")


def decode_action_token(token: str) -> tuple[str, CourierAction]:
    """Return ``(order_id, action)``; accepts standard and URL-safe alphabets."""
    if not token:
        raise InvalidActionToken("Empty token")

    normalized = token.strip().replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        decoded = base64.b64decode(normalized, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise InvalidActionToken("Token is not valid base64") from exc

    parts = decoded.split(SEPARATOR)
    if len(parts) != 2 or not parts[0]:
        raise InvalidActionToken("Token does not carry an order id and an action")

    order_id, action = parts
    try:
        return order_id, CourierAction(action)
    except ValueError as exc:
        raise InvalidActionToken(f"Unknown action {action!r}") from exc


def build_action_url(base_url: str, order_id: str, action: CourierAction | str) -> str:
    action = CourierAction(action)
    query = urlencode({"action": action.value, "token": encode_action_token(order_id, action)})
    return f"{base_url}?{query}"


def short_order_id(order_id: str) -> str:
    """First eight characters, upper-cased, as shown to people."""
    return str(order_id)[:8].upper()
