"""Core message processing pipeline.

This module is integration-agnostic. It only relies on the rewriter and a
messenger port, enabling other chat frontends without changes here.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Iterable

from core.errors import NetworkError
from core.models import MessageContext
from core.ports import MessengerPort
from core.rewriter import Rewriter

LOGGER = logging.getLogger(__name__)


class MessageProcessor:
    """Rewrites a message and, when anything changed, replaces the original."""

    def __init__(
        self,
        rewriter: Rewriter,
        messenger: MessengerPort,
        enabled_chats: Iterable[str],
        started_at: datetime,
    ) -> None:
        self._rewriter = rewriter
        self._messenger = messenger
        self._enabled_chats = {str(chat) for chat in enabled_chats}
        self._started_at = started_at

    async def handle(self, context: MessageContext) -> bool:
        """Process one message; return True when it was replaced."""

        # Backlog delivered after a reconnect is left alone.
        if context.date < self._started_at:
            return False

        if str(context.chat_id) not in self._enabled_chats:
            return False

        if not context.text.strip():
            return False

        try:
            replaced = await self._rewriter.replace_all(context.text)
        except NetworkError as exc:
            # A half-cleaned repost would still carry the unexpanded short link.
            LOGGER.warning("Leaving message %s in %s untouched: %s", context.message_id, context.chat_id, exc)
            return False

        if replaced == context.text:
            return False

        LOGGER.info("Replacing message %s in %s", context.message_id, context.chat_id)
        await self._messenger.repost(context, replaced)
        await self._messenger.delete(context)
        return True
