"""アプリケーション全体で共有する設定ローダー。"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

EnvName = Literal["local", "test", "staging", "production"]
TransportName = Literal["httpx", "wrapper"]


class IGDBSettings(BaseModel):
    """IGDB API 関連の資格情報と接続設定。

    `access_token` を直接指定するか、`client_secret` から Twitch OAuth で
    アクセストークンを取得するかのどちらかが必要。
    """

    client_id: str = Field(..., min_length=1, description="IGDB API client id")
    client_secret: SecretStr | None = Field(None, description="Twitch アプリの client secret")
    access_token: SecretStr | None = Field(None, description="発行済みのアクセストークン")
    token_url: AnyHttpUrl = Field(
        "https://id.twitch.tv/oauth2/token", description="Twitch OAuth2 token endpoint"
    )
    refresh_margin_seconds: int = Field(
        300,
        ge=0,
        description="アクセストークン有効期限のこの秒数前になったら再取得する",
    )
    api_url: AnyHttpUrl = Field("https://api.igdb.com/v4", description="IGDB API のベース URL")
    timeout_seconds: float = Field(10.0, gt=0, description="HTTP リクエストのタイムアウト秒数")
    transport: TransportName = Field("httpx", description="利用するトランスポート実装")

    @model_validator(mode="after")
    def _require_credential(self) -> IGDBSettings:
        if self.access_token is None and self.client_secret is None:
            msg = "IGDB access_token または client_secret のどちらかを設定してください"
            raise ValueError(msg)
        return self


class AppSettings(BaseSettings):
    """共有設定。`.env` 読み込みと環境変数バリデーションを担う。"""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: EnvName = Field("local", description="実行環境識別子")
    log_level: str = Field("INFO", description="ルートロガーのログレベル")
    log_json: bool = Field(False, description="ログを JSON 形式で出力する")
    igdb: IGDBSettings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """設定をロードし、再利用する。

    LRU キャッシュによりプロセス内での重複読み込みを防ぎ、
    `pytest` などから `get_settings.cache_clear()` を呼び出すことで再読込できる。
    """

    try:
        return AppSettings()
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


__all__ = [
    "AppSettings",
    "IGDBSettings",
    "EnvName",
    "TransportName",
    "get_settings",
]
