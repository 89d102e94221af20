"""Query parameter allowlist filtering."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from core.errors import MalformedURLError


def filter_query(url: str, allowed: Iterable[str]) -> str:
    """Return ``url`` keeping only query parameters named in ``allowed``.

    Kept pairs stay in their original relative order and are re-encoded with
    standard query encoding. When nothing is kept the ``?`` is dropped too.
    Scheme-less URLs such as ``bilibili.com/video/BV1?p=2`` are supported.
    """

    allowed = frozenset(allowed)
    try:
        parts = urlsplit(url)
        pairs = parse_qsl(parts.query, keep_blank_values=True)
    except ValueError as exc:
        raise MalformedURLError(url, str(exc)) from exc

    kept = [(key, value) for key, value in pairs if key in allowed]
    return urlunsplit(parts._replace(query=urlencode(kept)))


def drop_query(url: str) -> str:
    """Return ``url`` without any query component."""

    return filter_query(url, ())
