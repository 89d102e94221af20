"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape adapters expect so the app layer can build them safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"


@dataclass(frozen=True)
class HttpConfig:
    """Settings for the HTTP client used to follow short links."""

    timeout_seconds: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    proxy: Optional[str] = None
