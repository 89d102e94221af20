from __future__ import annotations

import logging

import app


def test_missing_config_is_created_and_bot_is_not_started(tmp_path, monkeypatch) -> None:
    def fail_run(settings) -> None:
        raise AssertionError("bot must not start without a config")

    monkeypatch.setattr(app, "_run", fail_run)
    path = tmp_path / "config.json"

    app.main(["-c", str(path)])

    assert path.exists()


def test_verbosity_shifts_level() -> None:
    assert app._resolve_level("INFO", 0) == logging.INFO
    assert app._resolve_level("INFO", 1) == logging.DEBUG
    assert app._resolve_level("INFO", 5) == logging.DEBUG
    assert app._resolve_level("INFO", -2) == logging.ERROR
    assert app._resolve_level("bogus", 0) == logging.INFO


def test_bot_token_is_always_redacted(monkeypatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "123:secret")
    monkeypatch.setenv("API_HASH", "hash-value-long")

    assert app._collect_redaction_values({}) == ["123:secret"]
    values = app._collect_redaction_values({"redact": {"enabled": True, "patterns": ["API_HASH"]}})
    assert values == ["hash-value-long", "123:secret"]

    formatter = app._RedactingFormatter(values, fmt="%(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "GET /bot123:secret/getMe", None, None)
    assert formatter.format(record) == "GET /bot***/getMe"
