"""IGDB 画像 CDN の URL 組み立て。"""

from __future__ import annotations

from enum import Enum

IGDB_IMAGE_BASE_URL = "https://images.igdb.com/igdb/image/upload"


class MediaQuality(str, Enum):
    """画像サイズの種類。値は CDN の URL パスセグメント。"""

    COVER_SMALL = "t_cover_small"  # 90x128
    COVER_BIG = "t_cover_big"  # 264x374
    SCREENSHOT_MED = "t_screenshot_med"  # 569x320
    SCREENSHOT_BIG = "t_screenshot_big"  # 889x500
    SCREENSHOT_HUGE = "t_screenshot_huge"  # 1280x720
    LOGO_MED = "t_logo_med"  # 284x160
    THUMB = "t_thumb"  # 90x90
    MICRO = "t_micro"  # 35x35
    HD = "t_720p"
    FULL_HD = "t_1080p"


def build_image_url(image_id: str, quality: MediaQuality, *, retina: bool = False) -> str:
    """`image_id` とサイズから画像 URL を返す。`retina` で倍解像度 (`_2x`) を指定する。"""

    segment = MediaQuality(quality).value
    if retina:
        segment = f"{segment}_2x"
    return f"{IGDB_IMAGE_BASE_URL}/{segment}/{image_id}.jpg"


__all__ = ["IGDB_IMAGE_BASE_URL", "MediaQuality", "build_image_url"]
