"""Application entry point for the untracker bot."""

from __future__ import annotations

import argparse
import asyncio
from datetime import datetime, timezone
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from telethon import events

from adapters.http_resolver import HttpxRedirectResolver, build_http_client
from adapters.telegram_mapper import MESSAGE, build_context, update_kind
from adapters.telegram_messenger import TelegramMessenger
from client import build_client
from core.processor import MessageProcessor
from core.rewriter import Rewriter
from settings import DEFAULT_CONFIG_PATH, Settings, load_settings, write_default_config

NAME = "UNTRACKER"
FONT = "tarty-1"

_LEVELS = [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR]


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    # The bot token appears in Bot API URLs, so it is masked unconditionally.
    names = {"BOT_TOKEN"}
    redact_cfg = config.get("redact", {}) if config else {}
    if redact_cfg.get("enabled", False):
        names.update(redact_cfg.get("patterns", []))
    values = [os.getenv(name) for name in names]
    return sorted({value for value in values if value}, key=len, reverse=True)


def _resolve_level(level_name: str, verbosity: int) -> int:
    level = getattr(logging, level_name.upper(), logging.INFO)
    if level not in _LEVELS:
        return level
    index = min(max(_LEVELS.index(level) - verbosity, 0), len(_LEVELS) - 1)
    return _LEVELS[index]


def _configure_logging(config: dict, verbosity: int = 0) -> None:
    if not config.get("enabled", False) and verbosity <= 0:
        return

    level = _resolve_level(str(config.get("level", "INFO")), verbosity)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/untracker.log")
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _load_or_init_settings(path: str) -> Optional[Settings]:
    if os.path.exists(path):
        return load_settings(path)
    write_default_config(path)
    print(f"Default config written to {path}")
    print("Please take a look and configure the bot, exiting...")
    return None


def _run(settings: Settings) -> None:
    logger = logging.getLogger(__name__)
    logger.info("Starting untracker")
    started_at = datetime.now(timezone.utc)

    client, bot_token = build_client()
    resolver = HttpxRedirectResolver(build_http_client(settings.http))
    rewriter = Rewriter(resolver)
    logger.info("%s rewrite rules are loaded", len(rewriter.rules))

    processor = MessageProcessor(
        rewriter=rewriter,
        messenger=TelegramMessenger(client),
        enabled_chats=settings.enabled_chats,
        started_at=started_at,
    )
    logger.info("Enabled chats: %s", ", ".join(sorted(settings.enabled_chats)) or "none")

    # All filtering is deferred to the core processor for consistency and testability.
    @client.on(events.NewMessage(incoming=True))
    async def handler(event) -> None:
        try:
            context = await build_context(event.message)
            await processor.handle(context)
        except Exception:
            logger.exception("Error while processing message")

    @client.on(events.Raw)
    async def raw_handler(update) -> None:
        kind = update_kind(update)
        if kind == MESSAGE:
            return
        if kind == "Unknown":
            logger.debug("Ignoring update %s", type(update).__name__)
            return
        logger.info("Unsupported update type: %s", kind)

    # Explicit lifecycle management makes start/shutdown behavior obvious.
    client.start(bot_token=bot_token)
    me = client.loop.run_until_complete(client.get_me())
    logger.info("Current bot: @%s. Listening for incoming messages...", getattr(me, "username", None))
    try:
        client.run_until_disconnected()
    finally:
        client.loop.run_until_complete(resolver.aclose())


async def _check(settings: Settings, text: str) -> str:
    resolver = HttpxRedirectResolver(build_http_client(settings.http))
    try:
        return await Rewriter(resolver).replace_all(text)
    finally:
        await resolver.aclose()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="untracker")
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="Path to config.json")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Less log output")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the bot")
    check_parser = subparsers.add_parser("check", help="Rewrite the given text once and print it")
    check_parser.add_argument("text", nargs="+")

    args = parser.parse_args(argv)
    settings = _load_or_init_settings(args.config)
    if settings is None:
        return
    _configure_logging(settings.logging, args.verbose - args.quiet)

    if args.command == "check":
        print(asyncio.run(_check(settings, " ".join(args.text))))
        return
    _print_banner()
    _run(settings)


if __name__ == "__main__":
    main()
