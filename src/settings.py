"""Configuration loading for untracker.

User-editable settings (enabled chats, proxy, HTTP and logging options) live
in a single JSON file. Secrets stay in the environment (.env).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from typing import Optional

from core.config import DEFAULT_USER_AGENT, HttpConfig

DEFAULT_CONFIG_PATH = os.path.join(os.getcwd(), "config.json")

# Written to disk on first start so users have something to edit.
DEFAULT_CONFIG: dict = {
    "enabled_chats": [],
    "proxy": None,
    "http": {
        "timeout_seconds": 10,
        "user_agent": DEFAULT_USER_AGENT,
    },
    "logging": {
        "enabled": True,
        "level": "INFO",
        "console": True,
        "file": {
            "enabled": False,
            "path": "logs/untracker.log",
            "max_bytes": 5 * 1024 * 1024,
            "backup_count": 5,
        },
        "redact": {
            "enabled": True,
            "patterns": ["BOT_TOKEN", "API_HASH"],
        },
    },
}


@dataclass(frozen=True)
class Settings:
    """Validated config.json contents."""

    path: str
    enabled_chats: frozenset
    http: HttpConfig
    logging: dict = field(default_factory=dict)


def write_default_config(path: str) -> None:
    """Write DEFAULT_CONFIG to ``path``, creating parent folders."""

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(DEFAULT_CONFIG, handle, indent=2)
        handle.write("\n")


def _load_json_config(path: str) -> dict:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    if not os.path.isfile(path):
        raise ValueError(f"Config path is not a file: {path}")

    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def load_settings(path: Optional[str] = None) -> Settings:
    """Load and normalize config.json."""

    path = path or DEFAULT_CONFIG_PATH
    raw = _load_json_config(path)

    # Chat ids are compared as strings so "-100123" and -100123 both work.
    enabled_chats = frozenset(str(chat) for chat in raw.get("enabled_chats", []) or [])

    http_cfg = raw.get("http", {}) or {}
    http = HttpConfig(
        timeout_seconds=float(http_cfg.get("timeout_seconds", 10)),
        user_agent=http_cfg.get("user_agent") or DEFAULT_USER_AGENT,
        proxy=raw.get("proxy") or None,
    )

    return Settings(
        path=path,
        enabled_chats=enabled_chats,
        http=http,
        logging=raw.get("logging", {}) or {},
    )
