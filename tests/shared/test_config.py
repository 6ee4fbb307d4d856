"""shared.config の読み込みと失敗ケースを確認するテスト。"""

from __future__ import annotations

import pytest

from game_metadata.shared.config import get_settings
from game_metadata.shared.exceptions import ConfigurationError

IGDB_KEYS = (
    "IGDB__CLIENT_ID",
    "IGDB__CLIENT_SECRET",
    "IGDB__ACCESS_TOKEN",
    "IGDB__TOKEN_URL",
    "IGDB__REFRESH_MARGIN_SECONDS",
    "IGDB__API_URL",
    "IGDB__TIMEOUT_SECONDS",
    "IGDB__TRANSPORT",
)


@pytest.fixture(autouse=True)
def _cleanup(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in IGDB_KEYS:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_fail_when_env_missing() -> None:
    """必須環境変数が欠けている場合 ConfigurationError が発生する。"""

    with pytest.raises(ConfigurationError):
        get_settings()


def test_settings_require_token_or_secret(monkeypatch) -> None:
    monkeypatch.setenv("IGDB__CLIENT_ID", "cid")

    with pytest.raises(ConfigurationError):
        get_settings()


def test_settings_load_from_nested_env(monkeypatch) -> None:
    monkeypatch.setenv("IGDB__CLIENT_ID", "cid")
    monkeypatch.setenv("IGDB__CLIENT_SECRET", "secret")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = get_settings()

    assert settings.igdb.client_id == "cid"
    assert settings.igdb.client_secret.get_secret_value() == "secret"
    assert settings.igdb.access_token is None
    assert str(settings.igdb.token_url) == "https://id.twitch.tv/oauth2/token"
    assert settings.igdb.refresh_margin_seconds == 300
    assert settings.igdb.transport == "httpx"
    assert settings.igdb.timeout_seconds == 10.0
    assert settings.log_level == "DEBUG"
    assert get_settings() is settings


def test_settings_override_connection_config(monkeypatch) -> None:
    """トークン・API URL・トランスポートを環境変数で上書きできる。"""

    monkeypatch.setenv("IGDB__CLIENT_ID", "cid")
    monkeypatch.setenv("IGDB__ACCESS_TOKEN", "token")
    monkeypatch.setenv("IGDB__API_URL", "https://proxy.example.com/v4")
    monkeypatch.setenv("IGDB__TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("IGDB__TRANSPORT", "wrapper")

    settings = get_settings()

    assert settings.igdb.access_token.get_secret_value() == "token"
    assert str(settings.igdb.api_url) == "https://proxy.example.com/v4"
    assert settings.igdb.timeout_seconds == 2.5
    assert settings.igdb.transport == "wrapper"


def test_settings_read_dotenv_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("IGDB__CLIENT_ID=from-file\nIGDB__ACCESS_TOKEN=tok\n")

    settings = get_settings()

    assert settings.igdb.client_id == "from-file"


def test_settings_reject_unknown_transport(monkeypatch) -> None:
    monkeypatch.setenv("IGDB__CLIENT_ID", "cid")
    monkeypatch.setenv("IGDB__ACCESS_TOKEN", "token")
    monkeypatch.setenv("IGDB__TRANSPORT", "carrier-pigeon")

    with pytest.raises(ConfigurationError):
        get_settings()
