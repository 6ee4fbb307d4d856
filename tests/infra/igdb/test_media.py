from __future__ import annotations

import pytest

from game_metadata.infra.igdb import MediaQuality, build_image_url


@pytest.mark.parametrize(
    ("quality", "segment"),
    [
        (MediaQuality.COVER_SMALL, "t_cover_small"),
        (MediaQuality.COVER_BIG, "t_cover_big"),
        (MediaQuality.SCREENSHOT_HUGE, "t_screenshot_huge"),
        (MediaQuality.THUMB, "t_thumb"),
        (MediaQuality.HD, "t_720p"),
        (MediaQuality.FULL_HD, "t_1080p"),
    ],
)
def test_build_image_url(quality: MediaQuality, segment: str) -> None:
    url = build_image_url("sc6abc", quality)

    assert url == f"https://images.igdb.com/igdb/image/upload/{segment}/sc6abc.jpg"


def test_build_image_url_retina() -> None:
    url = build_image_url("co1", MediaQuality.COVER_BIG, retina=True)

    assert url == "https://images.igdb.com/igdb/image/upload/t_cover_big_2x/co1.jpg"
