"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Any, Optional

from telethon.tl.custom import Message
from telethon.tl.types import MessageMediaWebPage

from core.models import ForwardOrigin, MessageContext, UserRef

MESSAGE = "Message"

# Raw update class name -> update kind. Only MESSAGE is processed.
_UPDATE_KINDS = {
    "UpdateNewMessage": MESSAGE,
    "UpdateShortMessage": MESSAGE,
    "UpdateShortChatMessage": MESSAGE,
    # Supergroup messages arrive as channel updates.
    "UpdateNewChannelMessage": MESSAGE,
    "UpdateEditMessage": "EditedMessage",
    "UpdateEditChannelMessage": "EditedMessage",
    "UpdateBotInlineQuery": "InlineQuery",
    "UpdateBotInlineSend": "ChosenInlineResult",
    "UpdateBotCallbackQuery": "CallbackQuery",
    "UpdateInlineBotCallbackQuery": "CallbackQuery",
    "UpdateBotShippingQuery": "ShippingQuery",
    "UpdateBotPrecheckoutQuery": "PreCheckoutQuery",
    "UpdateMessagePoll": "Poll",
    "UpdateMessagePollVote": "PollAnswer",
    "UpdateChannelParticipant": "ChatMember",
    "UpdateChatParticipant": "ChatMember",
    "UpdateBotChatInviteRequester": "ChatJoinRequest",
    "UpdateDeleteMessages": "DeletedMessages",
    "UpdateDeleteChannelMessages": "DeletedMessages",
}


def update_kind(update: Any) -> str:
    """Return the kind name of a raw Telethon update, or "Unknown"."""

    return _UPDATE_KINDS.get(type(update).__name__, "Unknown")


def _user_ref(entity: Any) -> Optional[UserRef]:
    # Channels and anonymous admins have a title instead of a first name.
    if entity is None or not hasattr(entity, "first_name"):
        return None
    return UserRef(
        id=entity.id,
        first_name=entity.first_name or "",
        last_name=getattr(entity, "last_name", None),
        username=getattr(entity, "username", None),
    )


async def _forward_origin(message: Message) -> Optional[ForwardOrigin]:
    forward = getattr(message, "forward", None)
    if forward is None:
        return None

    sender = await forward.get_sender()
    user = _user_ref(sender)
    if user is not None:
        return ForwardOrigin(user=user)

    chat = await forward.get_chat()
    if chat is not None and hasattr(chat, "title"):
        return ForwardOrigin(
            channel_id=chat.id,
            channel_title=chat.title,
            channel_username=getattr(chat, "username", None),
            channel_message_id=getattr(forward, "channel_post", None),
        )

    from_name = getattr(forward, "from_name", None)
    if from_name:
        return ForwardOrigin(sender_name=from_name)
    return ForwardOrigin()


def _message_text(message: Message) -> str:
    # raw_text is the caption for photos and videos. Reposting a caption as text
    # and deleting the original would lose the media, so those are left alone.
    # Link previews also show up as media on plain text messages.
    media = getattr(message, "media", None)
    if media is not None and not isinstance(media, MessageMediaWebPage):
        return ""
    return message.raw_text or ""


async def build_context(message: Message) -> MessageContext:
    """Build a core MessageContext from a Telethon Message."""

    sender = await message.get_sender()
    return MessageContext(
        chat_id=message.chat_id,
        message_id=message.id,
        date=message.date,
        text=_message_text(message),
        sender=_user_ref(sender),
        forward=await _forward_origin(message),
        reply_to_message_id=getattr(message, "reply_to_msg_id", None),
    )
