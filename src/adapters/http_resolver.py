"""HTTP redirect resolution adapter.

Follows a short link with a single GET and reports where it landed. Errors are
translated into core error types so the core never sees httpx exceptions.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from core.config import HttpConfig
from core.errors import MalformedURLError, NetworkError

LOGGER = logging.getLogger(__name__)


def build_http_client(config: HttpConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Create the shared AsyncClient used for redirect resolution."""

    # GET rather than HEAD: several shorteners reject HEAD requests.
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(config.timeout_seconds),
        headers={"User-Agent": config.user_agent},
        proxy=config.proxy,
        transport=transport,
    )


def _with_scheme(url: str) -> str:
    if url.lower().startswith(("http://", "https://")):
        return url
    return f"https://{url}"


class HttpxRedirectResolver:
    """RedirectResolver backed by an httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def resolve(self, url: str) -> str:
        """Return the final URL after following all redirects."""

        target = _with_scheme(url)
        try:
            response = await self._client.get(target)
        except httpx.InvalidURL as exc:
            raise MalformedURLError(url, str(exc)) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(url, str(exc) or type(exc).__name__) from exc

        if response.is_error:
            # The landing page may refuse bots; the URL itself is what we need.
            LOGGER.debug("Final response for %s was %s", url, response.status_code)
        return str(response.url)

    async def aclose(self) -> None:
        await self._client.aclose()
