from __future__ import annotations

import asyncio

import pytest

from core.errors import NetworkError
from core.rewriter import Rewriter, replace_all
from core.rules import filter_rule, resolve_rule, static_rule
from stubs import StubResolver

VIDEO = "https://www.bilibili.com/video/BV1Hg411T7fT/"


def test_short_link_is_expanded_and_filtered() -> None:
    resolver = StubResolver({"https://b23.tv/AbCdEf1": f"{VIDEO}?p=2&share_source=copy_web&t=30"})
    result = asyncio.run(Rewriter(resolver).replace_all("watch https://b23.tv/AbCdEf1 now"))

    assert result == f"watch {VIDEO}?p=2&t=30 now"
    assert resolver.calls == ["https://b23.tv/AbCdEf1"]


def test_expanded_link_is_canonicalized_by_later_rules() -> None:
    resolver = StubResolver(
        {"a.co/d/abc123": "https://www.amazon.com/Some-Thing/dp/B00NLZUM36?ref_=dbs_s_aps"}
    )
    result = asyncio.run(Rewriter(resolver).replace_all("a.co/d/abc123"))
    assert result == "https://www.amazon.com/dp/B00NLZUM36/"


def test_several_short_links_with_different_lengths() -> None:
    resolver = StubResolver(
        {
            "https://b23.tv/aaa": f"{VIDEO}?t=5&spm=1",
            "https://b23.tv/bbbbbb": "https://www.bilibili.com/video/BV2/",
        }
    )
    text = "1) https://b23.tv/aaa 2) https://b23.tv/bbbbbb 3) https://b23.tv/aaa"
    result = asyncio.run(Rewriter(resolver).replace_all(text))

    assert result == (
        f"1) {VIDEO}?t=5 2) https://www.bilibili.com/video/BV2/ 3) {VIDEO}?t=5"
    )
    # Every occurrence is resolved on its own, in text order.
    assert resolver.calls == ["https://b23.tv/aaa", "https://b23.tv/bbbbbb", "https://b23.tv/aaa"]


def test_same_rule_matches_with_shrinking_replacements() -> None:
    text = "a twitter.com/A/status/1?s=20 b https://x.com/LongerName/status/22222?t=abcdefghijkl c"
    result = asyncio.run(Rewriter(StubResolver()).replace_all(text))
    assert result == (
        "a https://vxtwitter.com/A/status/1 b https://vxtwitter.com/LongerName/status/22222 c"
    )


@pytest.mark.parametrize("reverse", [False, True])
def test_two_platforms_in_either_order(reverse: bool) -> None:
    tracked = [
        "https://www.amazon.com/Widget-Name/dp/B00NLZUM36/ref=sr_1_1?crid=2X&keywords=widget",
        "twitter.com/User/status/123?s=20",
    ]
    clean = ["https://www.amazon.com/dp/B00NLZUM36/", "https://vxtwitter.com/User/status/123"]
    if reverse:
        tracked.reverse()
        clean.reverse()

    text = f"first {tracked[0]} then {tracked[1]} done"
    result = asyncio.run(Rewriter(StubResolver()).replace_all(text))
    assert result == f"first {clean[0]} then {clean[1]} done"


def test_text_without_links_is_returned_unchanged() -> None:
    text = "Just chatting, nothing to see here. 你好!"
    resolver = StubResolver()
    assert asyncio.run(replace_all(text, resolver)) == text
    assert resolver.calls == []


def test_network_error_aborts_the_call() -> None:
    resolver = StubResolver(failing={"https://b23.tv/dead"})
    text = "twitter.com/User/status/123?s=20 https://b23.tv/dead"
    with pytest.raises(NetworkError):
        asyncio.run(Rewriter(resolver).replace_all(text))


def test_malformed_match_is_skipped_in_place() -> None:
    rule = filter_rule("ipv6", r"http://\[\S*", ())
    text = "bad http://[::1/x?a=1 good http://[::1]/y?a=1"
    result = asyncio.run(Rewriter(StubResolver(), rules=[rule]).replace_all(text))
    assert result == "bad http://[::1/x?a=1 good http://[::1]/y"


def test_reduced_rule_set_can_be_injected() -> None:
    rule = static_rule("shout", r"(?P<word>hello)", "HELLO")
    rewriter = Rewriter(StubResolver(), rules=[rule])

    text = "hello https://www.amazon.de/s?k=foo&crid=X"
    assert asyncio.run(rewriter.replace_all(text)) == "HELLO https://www.amazon.de/s?k=foo&crid=X"
    assert asyncio.run(Rewriter(StubResolver(), rules=[]).replace_all(text)) == text


def test_resolve_rule_fetches_url_group_when_present() -> None:
    rule = resolve_rule("short", r"(?P<url>https://s\.example/[a-z0-9]+)(?:\?\S*)?", ("id",))
    resolver = StubResolver({"https://s.example/abc": "https://example.com/item?id=7&ref=share"})
    result = asyncio.run(Rewriter(resolver, rules=[rule]).replace_all("https://s.example/abc?from=app"))

    assert result == "https://example.com/item?id=7"
    assert resolver.calls == ["https://s.example/abc"]
