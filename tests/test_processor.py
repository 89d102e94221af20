from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.models import MessageContext, UserRef
from core.processor import MessageProcessor
from core.rewriter import Rewriter
from stubs import StubResolver

STARTED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)
TRACKED = "https://www.amazon.de/s?k=foo&crid=X&ref=Y"


class FakeMessenger:
    def __init__(self) -> None:
        self.reposted: list[tuple[MessageContext, str]] = []
        self.deleted: list[MessageContext] = []

    async def repost(self, context: MessageContext, text: str) -> None:
        self.reposted.append((context, text))

    async def delete(self, context: MessageContext) -> None:
        self.deleted.append(context)


def _make_context(*, text: str = TRACKED, chat_id: int = -100123, offset: timedelta = timedelta(minutes=1)) -> MessageContext:
    return MessageContext(
        chat_id=chat_id,
        message_id=42,
        date=STARTED_AT + offset,
        text=text,
        sender=UserRef(id=1, first_name="Alice", username="alice"),
    )


def _processor(messenger: FakeMessenger, resolver: Optional[StubResolver] = None, chats=("-100123",)) -> MessageProcessor:
    return MessageProcessor(
        rewriter=Rewriter(resolver or StubResolver()),
        messenger=messenger,
        enabled_chats=chats,
        started_at=STARTED_AT,
    )


def test_replaces_message_with_tracking_link() -> None:
    messenger = FakeMessenger()
    context = _make_context()

    assert asyncio.run(_processor(messenger).handle(context)) is True
    assert messenger.reposted == [(context, "https://www.amazon.de/s?k=foo")]
    assert messenger.deleted == [context]


def test_ignores_chats_that_are_not_enabled() -> None:
    messenger = FakeMessenger()
    assert asyncio.run(_processor(messenger).handle(_make_context(chat_id=-100999))) is False
    assert not messenger.reposted
    assert not messenger.deleted


def test_enabled_chats_may_be_configured_as_ints() -> None:
    messenger = FakeMessenger()
    assert asyncio.run(_processor(messenger, chats=[-100123]).handle(_make_context())) is True


def test_ignores_messages_sent_before_start() -> None:
    messenger = FakeMessenger()
    context = _make_context(offset=timedelta(minutes=-5))
    assert asyncio.run(_processor(messenger).handle(context)) is False
    assert not messenger.reposted


def test_clean_text_is_left_alone() -> None:
    messenger = FakeMessenger()
    for text in ["", "   ", "https://www.amazon.de/s?k=foo"]:
        assert asyncio.run(_processor(messenger).handle(_make_context(text=text))) is False
    assert not messenger.reposted
    assert not messenger.deleted


def test_network_failure_leaves_message_untouched() -> None:
    messenger = FakeMessenger()
    resolver = StubResolver(failing={"https://b23.tv/dead"})
    context = _make_context(text=f"{TRACKED} https://b23.tv/dead")

    assert asyncio.run(_processor(messenger, resolver).handle(context)) is False
    assert not messenger.reposted
    assert not messenger.deleted
