"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class UserRef:
    """The parts of a Telegram user needed for attribution."""

    id: int
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None


@dataclass(frozen=True)
class ForwardOrigin:
    """Where a forwarded message originally came from.

    Exactly one of ``user``, ``channel_title``/``channel_id`` or
    ``sender_name`` describes the origin; hidden users only expose a name.
    """

    user: Optional[UserRef] = None
    channel_id: Optional[int] = None
    channel_title: Optional[str] = None
    channel_username: Optional[str] = None
    channel_message_id: Optional[int] = None
    sender_name: Optional[str] = None


@dataclass(frozen=True)
class MessageContext:
    """Minimal message context used by the core processing pipeline."""

    chat_id: int
    message_id: int
    date: datetime
    text: str
    sender: Optional[UserRef] = None
    forward: Optional[ForwardOrigin] = None
    reply_to_message_id: Optional[int] = None
