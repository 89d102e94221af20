"""Rewrite rule descriptors (core domain).

A rule pairs a compiled pattern with one of three rewrite strategies. Rules are
immutable and shared by every rewrite call, so nothing here holds state.
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
import re
from typing import FrozenSet, Iterable, Optional

from core.matcher import MatchSpan, compile_pattern
from core.query_filter import filter_query


class RuleKind(enum.Enum):
    STATIC_TEMPLATE = "static-template"
    RESOLVE_AND_FILTER = "resolve-and-filter"
    FILTER_ONLY = "filter-only"


@dataclass(frozen=True)
class RewriteRule:
    """Compiled rule used by the rewriter."""

    name: str
    pattern: re.Pattern
    kind: RuleKind
    template: Optional[str] = None
    allowed_params: FrozenSet[str] = frozenset()

    def render(self, span: MatchSpan) -> str:
        """Fill the template with the span's named groups."""

        if self.template is None:
            raise ValueError(f"Rule {self.name} has no template")
        return self.template.format_map(span.groups)

    def filter(self, url: str) -> str:
        return filter_query(url, self.allowed_params)


def static_rule(name: str, source: str, template: str) -> RewriteRule:
    """Build a rule that substitutes captured groups into ``template``."""

    return RewriteRule(
        name=name,
        pattern=compile_pattern(name, source),
        kind=RuleKind.STATIC_TEMPLATE,
        template=template,
    )


def filter_rule(name: str, source: str, allowed: Iterable[str]) -> RewriteRule:
    """Build a rule that only strips query parameters outside ``allowed``."""

    return RewriteRule(
        name=name,
        pattern=compile_pattern(name, source),
        kind=RuleKind.FILTER_ONLY,
        allowed_params=frozenset(allowed),
    )


def resolve_rule(name: str, source: str, allowed: Iterable[str] = ()) -> RewriteRule:
    """Build a rule that follows redirects, then filters the final URL.

    An empty ``allowed`` drops the whole query of the resolved URL.
    """

    return RewriteRule(
        name=name,
        pattern=compile_pattern(name, source),
        kind=RuleKind.RESOLVE_AND_FILTER,
        allowed_params=frozenset(allowed),
    )
