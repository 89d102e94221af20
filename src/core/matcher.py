"""Pattern compilation and match span extraction (core domain)."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Iterator, Mapping

from core.errors import PatternCompileError

# Host patterns start with this so a bare domain never matches inside an
# already-qualified host (twitter.com inside vxtwitter.com or c.twitter.com).
HOST_BOUNDARY = r"(?<![\w.-])"


@dataclass(frozen=True)
class MatchSpan:
    """One match against a specific text snapshot.

    Offsets are string indices into the snapshot the span was found in and are
    meaningless for any other version of the text.
    """

    start: int
    end: int
    text: str
    groups: Mapping[str, str] = field(default_factory=dict)


def compile_pattern(rule_name: str, source: str) -> re.Pattern:
    """Compile a rule pattern, raising PatternCompileError on bad syntax."""

    try:
        # ASCII classes: CJK text glued to a link is neither part of it nor a
        # host-qualifying letter in front of it.
        return re.compile(source, re.IGNORECASE | re.ASCII)
    except re.error as exc:
        raise PatternCompileError(rule_name, source, str(exc)) from exc


def find_matches(pattern: re.Pattern, text: str) -> Iterator[MatchSpan]:
    """Yield non-overlapping matches of ``pattern`` in ``text``, left to right."""

    for match in pattern.finditer(text):
        groups = {name: value or "" for name, value in match.groupdict().items()}
        yield MatchSpan(
            start=match.start(),
            end=match.end(),
            text=match.group(0),
            groups=groups,
        )
