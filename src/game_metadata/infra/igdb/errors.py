"""IGDB クライアントが送出する例外。"""

from __future__ import annotations

from game_metadata.shared.exceptions import BaseAppError


class IGDBClientError(BaseAppError):
    """IGDB クライアント共通の例外。"""

    default_message = "IGDB client error"


class IGDBTransportError(IGDBClientError):
    """通信失敗または成功以外の HTTP ステータス。"""

    default_message = "IGDB API request failed"

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IGDBRateLimitError(IGDBTransportError):
    """レート超過 (HTTP 429) に起因するエラー。"""

    default_message = "IGDB API rate limit exceeded"


class IGDBTimeoutError(IGDBClientError):
    """呼び出しごとのタイムアウトを超過した。"""

    default_message = "IGDB API request timed out"


class IGDBDecodeError(IGDBClientError):
    """レスポンスが期待するエンティティ形式に変換できない。"""

    default_message = "Failed to decode IGDB response"


class IGDBNotFoundError(IGDBClientError):
    """単一エンティティを期待する呼び出しで該当が 0 件だった。"""

    default_message = "IGDB entity not found"


class IGDBInvalidArgumentError(IGDBClientError, ValueError):
    """クエリビルダーやクライアントへの不正な引数。"""

    default_message = "Invalid argument for IGDB query"


class IGDBMediaWriteError(IGDBClientError, OSError):
    """画像のディスク書き込みに失敗した。"""

    default_message = "Failed to write IGDB media to disk"


__all__ = [
    "IGDBClientError",
    "IGDBDecodeError",
    "IGDBInvalidArgumentError",
    "IGDBMediaWriteError",
    "IGDBNotFoundError",
    "IGDBRateLimitError",
    "IGDBTimeoutError",
    "IGDBTransportError",
]
