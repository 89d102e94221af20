"""Error types raised by the rewrite core."""

from __future__ import annotations


class RewriteError(Exception):
    """Base class for all rewrite pipeline failures."""


class PatternCompileError(RewriteError):
    """A rule pattern failed to compile. Only raised while building rules."""

    def __init__(self, rule_name: str, source: str, reason: str) -> None:
        super().__init__(f"Invalid pattern for rule {rule_name!r}: {reason} ({source})")
        self.rule_name = rule_name
        self.source = source


class NetworkError(RewriteError):
    """Redirect resolution failed (transport, timeout, DNS)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to resolve {url}: {reason}")
        self.url = url


class MalformedURLError(RewriteError):
    """A matched span is not a structurally valid URL."""

    def __init__(self, url: str, reason: str = "unparseable URL") -> None:
        super().__init__(f"Malformed URL {url!r}: {reason}")
        self.url = url
