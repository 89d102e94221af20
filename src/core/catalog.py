"""Built-in platform rule catalog.

Order matters: short-link rules come first so that an expanded link is still
seen by the canonicalizing rules further down the list.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Tuple

from core.matcher import HOST_BOUNDARY
from core.rules import RewriteRule, filter_rule, resolve_rule, static_rule

LOGGER = logging.getLogger(__name__)

SCHEME = r"(?:https?://)?"
# RFC 3986 characters only, so adjoining CJK text is never swallowed.
URL_CHAR = r"[a-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]"
# Trailing .,;:!?)' and the like belong to the sentence, not the link.
URL_END = r"[a-z0-9\-_~/#@$&*+=%]"
QUERY_TAIL = r"(?:\?" + URL_CHAR + "*" + URL_END + ")?"
PATH_TAIL = r"(?:[/?]" + URL_CHAR + "*" + URL_END + "|/)?"

# Playback position (page / timestamp) is the only bilibili state worth keeping.
BILIBILI_PARAMS = ("p", "t")
WECHAT_PARAMS = ("__biz", "mid", "idx", "sn")

AMAZON_DOMAIN = (
    r"(?P<domain>" + HOST_BOUNDARY + SCHEME
    + r"(?:(?:www|smile)\.)?amazon\.(?:com?(?:\.[a-z]{2})?|[a-z]{2}))"
)


def _build_rules() -> Tuple[RewriteRule, ...]:
    return (
        resolve_rule(
            "bilibili-short",
            HOST_BOUNDARY + SCHEME + r"(?:b23\.tv|bili2233\.cn)/[0-9a-z]+/?" + QUERY_TAIL,
            BILIBILI_PARAMS,
        ),
        resolve_rule(
            "generic-short",
            HOST_BOUNDARY + SCHEME
            + r"(?:amzn\.to|a\.co/d|t\.cn|xhslink\.com(?:/[a-z])?|v\.douyin\.com)"
            + r"/[0-9a-z_-]+/?" + QUERY_TAIL,
        ),
        filter_rule(
            "bilibili-video",
            HOST_BOUNDARY + SCHEME + r"(?:(?:www|m)\.)?bilibili\.com/video/[0-9a-z]+/?" + QUERY_TAIL,
            BILIBILI_PARAMS,
        ),
        static_rule(
            "bilibili-article",
            r"(?P<domain>" + HOST_BOUNDARY + SCHEME + r"(?:(?:www|m)\.)?bilibili\.com)"
            + r"/read/mobile/(?P<cvid>\d+)/?" + QUERY_TAIL,
            "{domain}/read/cv{cvid}",
        ),
        static_rule(
            "amazon-product",
            AMAZON_DOMAIN + r"/(?:[a-z0-9\-._~%!$&'()*+,;=:@]+/)?(?:dp|gp/product)/(?P<id>[0-9a-z]{10})" + PATH_TAIL,
            "{domain}/dp/{id}/",
        ),
        static_rule(
            "amazon-search",
            AMAZON_DOMAIN + r"/s\?(?:" + URL_CHAR + r"*?&)?k=(?P<keyword>[a-z0-9%+~_.-]*[a-z0-9%+~_-])"
            + r"(?:&" + URL_CHAR + "*" + URL_END + ")?",
            "{domain}/s?k={keyword}",
        ),
        static_rule(
            "twitter-post",
            HOST_BOUNDARY + SCHEME + r"(?:(?:www|mobile)\.)?(?:twitter|x)\.com"
            + r"/(?P<path>\w+/status/\d+)" + PATH_TAIL,
            "https://vxtwitter.com/{path}",
        ),
        filter_rule(
            "wechat-article",
            HOST_BOUNDARY + SCHEME + r"mp\.weixin\.qq\.com/s\?" + URL_CHAR + "*" + URL_END,
            WECHAT_PARAMS,
        ),
        static_rule(
            "jd-product",
            r"(?P<url>" + HOST_BOUNDARY + SCHEME + r"item(?:\.m)?\.jd\.com/(?:product/)?\d+\.html)"
            + QUERY_TAIL,
            "{url}",
        ),
    )


_RULES: Optional[Tuple[RewriteRule, ...]] = None
_RULES_LOCK = threading.Lock()


def default_rules() -> Tuple[RewriteRule, ...]:
    """Return the built-in rules, compiling them on first use only."""

    global _RULES
    if _RULES is None:
        with _RULES_LOCK:
            if _RULES is None:
                _RULES = _build_rules()
                LOGGER.debug("Compiled %s rewrite rules", len(_RULES))
    return _RULES
