"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for network and chat adapters so that the
core can be reused with different backends and replaced by fakes in tests.
"""

from __future__ import annotations

from typing import Protocol

from core.models import MessageContext


class RedirectResolver(Protocol):
    """Follows a URL's redirect chain with a single request."""

    async def resolve(self, url: str) -> str:
        """Return the final URL, raising NetworkError on failure."""
        ...


class MessengerPort(Protocol):
    """Chat operations required by the message processor."""

    async def repost(self, context: MessageContext, text: str) -> None:
        ...

    async def delete(self, context: MessageContext) -> None:
        ...
