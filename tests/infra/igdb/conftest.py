from __future__ import annotations

from collections.abc import Generator, Mapping
from typing import Any

import pytest

from game_metadata.infra.igdb import IGDBCredentials


class StubTransport:
    """トランスポートの呼び出しを記録し、登録済みの応答を返す。"""

    def __init__(self, actions: list[Any] | None = None, media: list[Any] | None = None) -> None:
        self._actions = list(actions or [])
        self._media = list(media or [])
        self.calls: list[dict[str, Any]] = []
        self.media_calls: list[str] = []
        self.media_closed = True

    def post(
        self,
        endpoint: str,
        body: str,
        *,
        headers: Mapping[str, str],
        timeout: float | None = None,
    ) -> bytes:
        self.calls.append(
            {"endpoint": endpoint, "body": body, "headers": dict(headers), "timeout": timeout}
        )
        if not self._actions:
            msg = "No action registered"
            raise RuntimeError(msg)
        action = self._actions.pop(0)
        if isinstance(action, Exception):
            raise action
        return action

    def iter_bytes(
        self, url: str, *, timeout: float | None = None
    ) -> Generator[bytes, None, None]:
        self.media_calls.append(url)
        self.media_closed = False
        try:
            for chunk in self._media:
                if isinstance(chunk, Exception):
                    raise chunk
                yield chunk
        finally:
            self.media_closed = True


@pytest.fixture()
def credentials() -> IGDBCredentials:
    return IGDBCredentials(client_id="cid", access_token="token")


@pytest.fixture()
def make_transport():
    def factory(actions: list[Any] | None = None, media: list[Any] | None = None) -> StubTransport:
        return StubTransport(actions, media)

    return factory
