"""Telegram bot client factory for untracker.

We explicitly manage the client's lifecycle (start/run_until_disconnected)
so it is obvious when the session is created and when it ends.
"""

from __future__ import annotations

import logging
import os
from typing import Tuple

from dotenv import load_dotenv
from telethon import TelegramClient


def read_credentials() -> Tuple[int, str, str, str]:
    """Return (api_id, api_hash, bot_token, session_name) from the environment."""

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    bot_token = os.getenv("BOT_TOKEN")
    session_name = os.getenv("SESSION_NAME", "untracker")

    # Fail fast on missing credentials instead of an interactive login prompt.
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")
    if not bot_token:
        raise RuntimeError("Missing BOT_TOKEN in environment")

    return int(api_id), api_hash, bot_token, session_name


def build_client() -> Tuple[TelegramClient, str]:
    """Create a Telethon client and return it with the bot token to start it."""

    api_id, api_hash, bot_token, session_name = read_credentials()
    logging.getLogger(__name__).info("Initializing Telegram client")
    return TelegramClient(session_name, api_id, api_hash), bot_token
