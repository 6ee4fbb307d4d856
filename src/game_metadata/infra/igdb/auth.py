"""IGDB API の認証情報と Twitch OAuth によるトークン取得。"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

import httpx

from game_metadata.shared.types import utc_now

from .errors import IGDBDecodeError, IGDBTimeoutError, IGDBTransportError

CLIENT_ID_HEADER = "Client-ID"
AUTHORIZATION_HEADER = "Authorization"


class IGDBCredentialsProtocol(Protocol):
    """リクエストごとに認証ヘッダーを返すオブジェクト。"""

    def auth_headers(self) -> dict[str, str]:
        """IGDB へ送る認証ヘッダーを返す。"""


def _auth_headers(client_id: str, access_token: str) -> dict[str, str]:
    return {
        CLIENT_ID_HEADER: client_id,
        AUTHORIZATION_HEADER: f"Bearer {access_token}",
        "Accept": "application/json",
    }


@dataclass(slots=True, frozen=True)
class IGDBCredentials:
    """発行済みのクライアント ID とアクセストークン。"""

    client_id: str
    access_token: str = field(repr=False)

    def auth_headers(self) -> dict[str, str]:
        return _auth_headers(self.client_id, self.access_token)


@dataclass(slots=True, frozen=True)
class IGDBAccessToken:
    """IGDB API へアクセスするためのアクセストークン。"""

    access_token: str = field(repr=False)
    expires_at: datetime | None


class TwitchOAuthClient:
    """Twitch OAuth2 (client credentials) でアクセストークンを取得するクライアント。"""

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        token_url: str,
        http_post: Callable[..., httpx.Response] = httpx.post,
        timeout: float = 10.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._http_post = http_post
        self._timeout = timeout
        self._clock = clock

    def fetch_app_access_token(self) -> IGDBAccessToken:
        try:
            response = self._http_post(
                self._token_url,
                data={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "grant_type": "client_credentials",
                },
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise IGDBTimeoutError("Twitch OAuth token request timed out") from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            msg = f"Twitch OAuth token request failed (status={status_code})"
            raise IGDBTransportError(msg, status_code=status_code) from exc
        except httpx.RequestError as exc:
            raise IGDBTransportError("Twitch OAuth token request failed") from exc

        try:
            payload = response.json()
            access_token = payload["access_token"]
        except (ValueError, KeyError, TypeError) as exc:
            raise IGDBDecodeError("Twitch OAuth token response is malformed") from exc
        if not isinstance(access_token, str) or not access_token:
            raise IGDBDecodeError("Twitch OAuth token response has no access_token")
        expires_in = payload.get("expires_in")
        expires_at = (
            self._clock() + timedelta(seconds=int(expires_in))
            if isinstance(expires_in, (int, float))
            else None
        )
        return IGDBAccessToken(access_token=access_token, expires_at=expires_at)


class IGDBAccessTokenProvider:
    """アクセストークンのキャッシュと有効期限管理を行うプロバイダー。"""

    def __init__(
        self,
        *,
        oauth_client: TwitchOAuthClient,
        refresh_margin: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._oauth_client = oauth_client
        self._refresh_margin = refresh_margin
        self._clock = clock
        self._cached_token: IGDBAccessToken | None = None

    def get_token(self) -> IGDBAccessToken:
        now = self._clock()
        if self._cached_token and not self._should_refresh(self._cached_token, now):
            return self._cached_token

        self._cached_token = self._oauth_client.fetch_app_access_token()
        return self._cached_token

    def _should_refresh(self, token: IGDBAccessToken, now: datetime) -> bool:
        if token.expires_at is None:
            return False
        return token.expires_at - self._refresh_margin <= now


class TwitchCredentials:
    """Twitch OAuth で取得したトークンを使う認証情報。

    トークンは最初のリクエスト時に取得され、期限が近づくと再取得される。
    """

    def __init__(self, *, client_id: str, token_provider: IGDBAccessTokenProvider) -> None:
        self.client_id = client_id
        self._token_provider = token_provider

    def auth_headers(self) -> dict[str, str]:
        token = self._token_provider.get_token()
        return _auth_headers(self.client_id, token.access_token)


__all__ = [
    "AUTHORIZATION_HEADER",
    "CLIENT_ID_HEADER",
    "IGDBAccessToken",
    "IGDBAccessTokenProvider",
    "IGDBCredentials",
    "IGDBCredentialsProtocol",
    "TwitchCredentials",
    "TwitchOAuthClient",
]
