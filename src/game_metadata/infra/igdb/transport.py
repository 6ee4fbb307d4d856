"""IGDB API との HTTP 通信を担うトランスポート。

エンドポイントクライアントはトランスポートに対して
`(エンドポイント, クエリ本文, 認証ヘッダー)` を渡すだけで、HTTP ライブラリの
例外は全てここで `IGDBTransportError` / `IGDBTimeoutError` に変換される。
"""

from __future__ import annotations

from collections.abc import Callable, Generator, Mapping
from typing import Any, Protocol

import httpx
import requests
from igdb.wrapper import IGDBWrapper

from game_metadata.shared.logging import get_logger

from .auth import AUTHORIZATION_HEADER, CLIENT_ID_HEADER
from .errors import IGDBRateLimitError, IGDBTimeoutError, IGDBTransportError

IGDB_API_URL = "https://api.igdb.com/v4"
DEFAULT_TIMEOUT = 10.0
MEDIA_CHUNK_SIZE = 64 * 1024


class IGDBTransportProtocol(Protocol):
    """エンドポイントクライアントが利用する通信インターフェース。"""

    def post(
        self,
        endpoint: str,
        body: str,
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> bytes:
        """クエリ本文を POST してレスポンス本文を返す。"""

    def iter_bytes(
        self, url: str, *, timeout: float | None = None
    ) -> Generator[bytes, None, None]:
        """画像などのバイナリをチャンク単位で取得する。

        途中で読み捨てる場合、呼び出し側は `close()` で接続を解放する。
        """


class IGDBWrapperProtocol(Protocol):
    """IGDBWrapper が満たすシンプルなプロトコル。"""

    def api_request(self, endpoint: str, query: str) -> bytes:
        """APICalypse クエリを実行してレスポンスを返す。"""


def _status_error(status_code: int | None, what: str) -> IGDBTransportError:
    if status_code == 429:
        return IGDBRateLimitError(status_code=status_code)
    return IGDBTransportError(f"{what} failed (status={status_code})", status_code=status_code)


class HttpxTransport:
    """httpx を用いた既定のトランスポート。"""

    def __init__(
        self,
        *,
        base_url: str = IGDB_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
        logger=None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logger or get_logger(__name__)

    def post(
        self,
        endpoint: str,
        body: str,
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> bytes:
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        request_headers = {"Content-Type": "text/plain", **headers}
        try:
            response = self._client.post(
                url,
                content=body.encode("utf-8"),
                headers=request_headers,
                **_timeout_kwargs(timeout),
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise IGDBTimeoutError(f"IGDB API request timed out ({endpoint})") from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            self._logger.warning(
                "igdb_http_error",
                endpoint=endpoint,
                status_code=status_code,
                body=exc.response.text.strip() or None,
            )
            raise _status_error(status_code, "IGDB API request") from exc
        except httpx.RequestError as exc:
            msg = f"IGDB API request failed ({endpoint}): {exc}"
            raise IGDBTransportError(msg) from exc
        return response.content

    def iter_bytes(
        self, url: str, *, timeout: float | None = None
    ) -> Generator[bytes, None, None]:
        try:
            with self._client.stream("GET", url, **_timeout_kwargs(timeout)) as response:
                response.raise_for_status()
                yield from response.iter_bytes(MEDIA_CHUNK_SIZE)
        except httpx.TimeoutException as exc:
            raise IGDBTimeoutError(f"Media download timed out ({url})") from exc
        except httpx.HTTPStatusError as exc:
            raise _status_error(exc.response.status_code, "Media download") from exc
        except httpx.RequestError as exc:
            raise IGDBTransportError(f"Media download failed ({url}): {exc}") from exc

    def close(self) -> None:
        self._client.close()


def _timeout_kwargs(timeout: float | None) -> dict[str, Any]:
    return {} if timeout is None else {"timeout": timeout}


class IGDBWrapperTransport:
    """IGDB 公式ラッパー (igdb-api-python) を包んだトランスポート。

    ラッパーはタイムアウト指定に対応していないため、クエリの `timeout` は
    無視される。画像取得は requests で行う。
    """

    def __init__(
        self,
        *,
        wrapper_factory: Callable[[str, str], IGDBWrapperProtocol] | None = None,
        http_get: Callable[..., requests.Response] = requests.get,
        timeout: float = DEFAULT_TIMEOUT,
        logger=None,
    ) -> None:
        self._wrapper_factory = wrapper_factory or IGDBWrapper
        self._wrapper: IGDBWrapperProtocol | None = None
        self._cached_credentials: tuple[str, str] | None = None
        self._http_get = http_get
        self._timeout = timeout
        self._logger = logger or get_logger(__name__)

    def post(
        self,
        endpoint: str,
        body: str,
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> bytes:
        wrapper = self._get_wrapper(headers)
        try:
            return wrapper.api_request(endpoint, body)
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise _status_error(status_code, "IGDB API request") from exc
        except requests.Timeout as exc:
            raise IGDBTimeoutError(f"IGDB API request timed out ({endpoint})") from exc
        except requests.RequestException as exc:
            msg = f"IGDB API request failed ({endpoint}): {exc}"
            raise IGDBTransportError(msg) from exc

    def iter_bytes(
        self, url: str, *, timeout: float | None = None
    ) -> Generator[bytes, None, None]:
        try:
            with self._http_get(url, stream=True, timeout=timeout or self._timeout) as response:
                response.raise_for_status()
                yield from response.iter_content(MEDIA_CHUNK_SIZE)
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise _status_error(status_code, "Media download") from exc
        except requests.Timeout as exc:
            raise IGDBTimeoutError(f"Media download timed out ({url})") from exc
        except requests.RequestException as exc:
            raise IGDBTransportError(f"Media download failed ({url}): {exc}") from exc

    def _get_wrapper(self, headers: Mapping[str, str]) -> IGDBWrapperProtocol:
        client_id = headers[CLIENT_ID_HEADER]
        access_token = headers[AUTHORIZATION_HEADER].removeprefix("Bearer ")
        credentials = (client_id, access_token)
        if self._wrapper is None or credentials != self._cached_credentials:
            self._logger.debug("igdb_wrapper_created", client_id=client_id)
            self._wrapper = self._wrapper_factory(client_id, access_token)
            self._cached_credentials = credentials
        return self._wrapper


__all__ = [
    "DEFAULT_TIMEOUT",
    "IGDB_API_URL",
    "HttpxTransport",
    "IGDBTransportProtocol",
    "IGDBWrapperProtocol",
    "IGDBWrapperTransport",
]
