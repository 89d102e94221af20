"""Rule pipeline that rewrites every known link in a message text.

Rules run in catalog order, each over the text produced by the previous rule.
Within one rule the output is assembled in a single left-to-right pass over the
scanned snapshot, copying the text between matches and inserting replacements,
so no match offset is ever applied to an edited string.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from core.catalog import default_rules
from core.errors import MalformedURLError
from core.matcher import MatchSpan, find_matches
from core.ports import RedirectResolver
from core.rules import RewriteRule, RuleKind

LOGGER = logging.getLogger(__name__)


class Rewriter:
    """Applies an ordered rule list to message text."""

    def __init__(
        self,
        resolver: RedirectResolver,
        rules: Optional[Iterable[RewriteRule]] = None,
    ) -> None:
        self._resolver = resolver
        self._rules = tuple(rules) if rules is not None else default_rules()

    @property
    def rules(self) -> tuple:
        return self._rules

    async def replace_all(self, text: str) -> str:
        """Return ``text`` with every rule applied in order.

        NetworkError from the resolver propagates and aborts the whole call.
        """

        for rule in self._rules:
            text = await self._apply_rule(rule, text)
        return text

    async def _apply_rule(self, rule: RewriteRule, snapshot: str) -> str:
        pieces: List[str] = []
        cursor = 0
        for span in find_matches(rule.pattern, snapshot):
            try:
                replacement = await self._rewrite(rule, span)
            except MalformedURLError as exc:
                # The span stays as-is; the rest of the text is still rewritten.
                LOGGER.debug("Skipping match for %s: %s", rule.name, exc)
                continue
            pieces.append(snapshot[cursor:span.start])
            pieces.append(replacement)
            cursor = span.end

        if not pieces:
            return snapshot
        pieces.append(snapshot[cursor:])
        return "".join(pieces)

    async def _rewrite(self, rule: RewriteRule, span: MatchSpan) -> str:
        if rule.kind is RuleKind.STATIC_TEMPLATE:
            return rule.render(span)
        if rule.kind is RuleKind.FILTER_ONLY:
            return rule.filter(span.text)
        if rule.kind is RuleKind.RESOLVE_AND_FILTER:
            # A rule may capture the link without its query as `url`.
            link = span.groups.get("url") or span.text
            resolved = await self._resolver.resolve(link)
            LOGGER.debug("Resolved %s -> %s", link, resolved)
            return rule.filter(resolved)
        raise ValueError(f"Unsupported rule kind: {rule.kind}")


async def replace_all(text: str, resolver: RedirectResolver) -> str:
    """Rewrite ``text`` with the built-in rules."""

    return await Rewriter(resolver).replace_all(text)
