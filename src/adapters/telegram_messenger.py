"""Telegram chat adapter that swaps a message for its cleaned version."""

from __future__ import annotations

import logging

from adapters.message_formatting import format_repost
from core.models import MessageContext

LOGGER = logging.getLogger(__name__)


class TelegramMessenger:
    """MessengerPort implementation backed by a Telethon client."""

    def __init__(self, client) -> None:
        self._client = client

    async def repost(self, context: MessageContext, text: str) -> None:
        """Send the cleaned text, replying to whatever the original replied to."""

        sent = await self._client.send_message(
            context.chat_id,
            format_repost(context, text),
            parse_mode="html",
            reply_to=context.reply_to_message_id,
        )
        LOGGER.debug("Reposted message %s as %s", context.message_id, getattr(sent, "id", None))

    async def delete(self, context: MessageContext) -> None:
        """Delete the original message. Needs admin rights in groups."""

        await self._client.delete_messages(context.chat_id, [context.message_id])
        LOGGER.debug("Deleted message %s in %s", context.message_id, context.chat_id)
