from __future__ import annotations

import logging

import pytest
import structlog

from game_metadata.shared.logging import REDACTED, configure_logging, get_logger, redact_secrets


def test_redact_secrets_masks_sensitive_keys() -> None:
    event = {"event": "igdb_request", "access_token": "abc", "client_secret": "s", "endpoint": "games"}

    result = redact_secrets(None, "info", event)

    assert result["access_token"] == REDACTED
    assert result["client_secret"] == REDACTED
    assert result["endpoint"] == "games"


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        configure_logging("LOUD")


def test_configured_logger_redacts_output(caplog: pytest.LogCaptureFixture) -> None:
    configure_logging(logging.INFO, json_output=True)
    try:
        with caplog.at_level(logging.INFO):
            get_logger("test", component="igdb").info("token_fetched", access_token="abc")
    finally:
        structlog.reset_defaults()

    assert "token_fetched" in caplog.text
    assert "abc" not in caplog.text
