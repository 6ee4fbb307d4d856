"""共有型・ユーティリティ。"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """UTC の現在時刻を返す。"""

    return datetime.now(UTC)


__all__ = ["utc_now"]
