"""Formatting of the cleaned-up repost.

The repost is HTML so sender mentions can link to users without a username.
"""

from __future__ import annotations

import html
from typing import Optional

from core.models import ForwardOrigin, MessageContext, UserRef


def format_user(user: Optional[UserRef]) -> str:
    """Return an @mention, or a tg:// mention link for users without one."""

    if user is None:
        return "Unknown"
    if user.username:
        return f"@{user.username}"
    name = html.escape(user.first_name)
    if user.last_name:
        name = f"{name} {html.escape(user.last_name)}"
    return f'<a href="tg://user?id={user.id}">{name}</a>'


def _format_channel(origin: ForwardOrigin) -> str:
    title = html.escape(origin.channel_title) if origin.channel_title else "unknown"
    msg_id = origin.channel_message_id
    if msg_id is None:
        return title
    if origin.channel_username:
        return f'<a href="https://t.me/{origin.channel_username}/{msg_id}">{title}</a>'
    # Private channels are only reachable through their bare id.
    return f'<a href="https://t.me/c/{origin.channel_id}/{msg_id}">{title}</a>'


def format_forward(origin: Optional[ForwardOrigin]) -> str:
    """Return the ", forwarded from ..." suffix, or "" for own messages."""

    if origin is None:
        return ""
    if origin.user is not None:
        return f", forwarded from {format_user(origin.user)}"
    if origin.channel_title is not None or origin.channel_id is not None:
        return f", forwarded from channel {_format_channel(origin)}"
    if origin.sender_name:
        return f", forwarded from {html.escape(origin.sender_name)}"
    return ""


def format_repost(context: MessageContext, text: str) -> str:
    """Return the HTML body that replaces the original message."""

    header = f"Sent by {format_user(context.sender)}{format_forward(context.forward)}:"
    return f"{header}\n{html.escape(text)}"
