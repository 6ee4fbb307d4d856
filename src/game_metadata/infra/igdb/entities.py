"""IGDB API のレスポンスエンティティとデコード処理。

各モデルは IGDB のリソース 1 件に対応するイミュータブルなレコード。
`id` のみ必須で、欠落した任意フィールドは文字列なら `""`、配列なら `()`、
数値・参照・日時なら `None` になる。参照フィールドは ID と展開済み
オブジェクト (`fields cover.image_id;` など) のどちらでも受け付け、ID に正規化する。
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError

from .errors import IGDBDecodeError


def _reference_id(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("id")
    return value


def _timestamp(value: Any) -> Any:
    # 0 は IGDB 側で未設定を表す。1970 年以前は負の秒数で返る
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return None
    return value


Reference = Annotated[int, BeforeValidator(_reference_id)]
Timestamp = Annotated[datetime | None, BeforeValidator(_timestamp)]


class IGDBEntity(BaseModel):
    """IGDB エンティティの基底モデル。"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int


class Game(IGDBEntity):
    name: str = ""
    slug: str = ""
    summary: str = ""
    storyline: str = ""
    url: str = ""
    category: int | None = None
    status: int | None = None
    first_release_date: Timestamp = None
    rating: float | None = None
    rating_count: int | None = None
    aggregated_rating: float | None = None
    total_rating: float | None = None
    cover: Reference | None = None
    parent_game: Reference | None = None
    version_parent: Reference | None = None
    franchise: Reference | None = None
    collection: Reference | None = None
    age_ratings: tuple[Reference, ...] = ()
    alternative_names: tuple[Reference, ...] = ()
    artworks: tuple[Reference, ...] = ()
    dlcs: tuple[Reference, ...] = ()
    expansions: tuple[Reference, ...] = ()
    franchises: tuple[Reference, ...] = ()
    game_engines: tuple[Reference, ...] = ()
    game_modes: tuple[Reference, ...] = ()
    genres: tuple[Reference, ...] = ()
    involved_companies: tuple[Reference, ...] = ()
    keywords: tuple[Reference, ...] = ()
    multiplayer_modes: tuple[Reference, ...] = ()
    platforms: tuple[Reference, ...] = ()
    player_perspectives: tuple[Reference, ...] = ()
    release_dates: tuple[Reference, ...] = ()
    screenshots: tuple[Reference, ...] = ()
    similar_games: tuple[Reference, ...] = ()
    tags: tuple[int, ...] = ()
    themes: tuple[Reference, ...] = ()
    videos: tuple[Reference, ...] = ()
    websites: tuple[Reference, ...] = ()
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class Character(IGDBEntity):
    name: str = ""
    slug: str = ""
    description: str = ""
    url: str = ""
    akas: tuple[str, ...] = ()
    country_name: str = ""
    gender: int | None = None
    species: int | None = None
    mug_shot: Reference | None = None
    games: tuple[Reference, ...] = ()
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class Platform(IGDBEntity):
    name: str = ""
    slug: str = ""
    abbreviation: str = ""
    alternative_name: str = ""
    summary: str = ""
    url: str = ""
    category: int | None = None
    generation: int | None = None
    platform_family: Reference | None = None
    platform_logo: Reference | None = None
    versions: tuple[Reference, ...] = ()
    websites: tuple[Reference, ...] = ()
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class IGDBImage(IGDBEntity):
    """画像を持つエンティティの共通フィールド。"""

    image_id: str = ""
    url: str = ""
    width: int | None = None
    height: int | None = None
    alpha_channel: bool = False
    animated: bool = False
    checksum: str = ""


class Cover(IGDBImage):
    game: Reference | None = None


class Screenshot(IGDBImage):
    game: Reference | None = None


class Artwork(IGDBImage):
    game: Reference | None = None


class CharacterMugShot(IGDBImage):
    pass


class PlatformLogo(IGDBImage):
    pass


class GameEngine(IGDBEntity):
    name: str = ""
    slug: str = ""
    description: str = ""
    url: str = ""
    logo: Reference | None = None
    companies: tuple[Reference, ...] = ()
    platforms: tuple[Reference, ...] = ()
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class Franchise(IGDBEntity):
    name: str = ""
    slug: str = ""
    url: str = ""
    games: tuple[Reference, ...] = ()
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class ReleaseDate(IGDBEntity):
    game: Reference | None = None
    platform: Reference | None = None
    date: Timestamp = None
    human: str = ""
    category: int | None = None
    region: int | None = None
    m: int | None = None
    y: int | None = None
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class MultiplayerMode(IGDBEntity):
    game: Reference | None = None
    platform: Reference | None = None
    campaigncoop: bool = False
    dropin: bool = False
    lancoop: bool = False
    offlinecoop: bool = False
    onlinecoop: bool = False
    splitscreen: bool = False
    splitscreenonline: bool = False
    offlinecoopmax: int | None = None
    offlinemax: int | None = None
    onlinecoopmax: int | None = None
    onlinemax: int | None = None
    checksum: str = ""


class Theme(IGDBEntity):
    name: str = ""
    slug: str = ""
    url: str = ""
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class Website(IGDBEntity):
    game: Reference | None = None
    url: str = ""
    category: int | None = None
    trusted: bool = False
    checksum: str = ""


class AgeRating(IGDBEntity):
    category: int | None = None
    rating: int | None = None
    synopsis: str = ""
    rating_cover_url: str = ""
    content_descriptions: tuple[Reference, ...] = ()
    checksum: str = ""


class Company(IGDBEntity):
    name: str = ""
    slug: str = ""
    description: str = ""
    url: str = ""
    country: int | None = None
    start_date: Timestamp = None
    logo: Reference | None = None
    parent: Reference | None = None
    developed: tuple[Reference, ...] = ()
    published: tuple[Reference, ...] = ()
    websites: tuple[Reference, ...] = ()
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class GameMode(IGDBEntity):
    name: str = ""
    slug: str = ""
    url: str = ""
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class PlayerPerspective(IGDBEntity):
    name: str = ""
    slug: str = ""
    url: str = ""
    created_at: Timestamp = None
    updated_at: Timestamp = None
    checksum: str = ""


class GameVideo(IGDBEntity):
    game: Reference | None = None
    name: str = ""
    video_id: str = ""
    checksum: str = ""


EntityT = TypeVar("EntityT", bound=IGDBEntity)


def decode_entities(payload: bytes, entity_type: type[EntityT]) -> tuple[EntityT, ...]:
    """レスポンスバイト列をエンティティ群へ変換する。空配列は空タプル。"""

    if not payload:
        return ()

    try:
        decoded = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise IGDBDecodeError("Invalid JSON payload for IGDB response") from exc

    if not isinstance(decoded, list):
        raise IGDBDecodeError("IGDB JSON payload must be an array")

    entities: list[EntityT] = []
    for raw in decoded:
        if not isinstance(raw, dict):
            msg = f"Each {entity_type.__name__} record must be an object"
            raise IGDBDecodeError(msg)
        try:
            entities.append(entity_type.model_validate(raw))
        except ValidationError as exc:
            msg = f"{entity_type.__name__} record does not match the expected schema: {exc}"
            raise IGDBDecodeError(msg) from exc

    return tuple(entities)


__all__ = [
    "AgeRating",
    "Artwork",
    "Character",
    "CharacterMugShot",
    "Company",
    "Cover",
    "EntityT",
    "Franchise",
    "Game",
    "GameEngine",
    "GameMode",
    "GameVideo",
    "IGDBEntity",
    "IGDBImage",
    "MultiplayerMode",
    "Platform",
    "PlatformLogo",
    "PlayerPerspective",
    "Reference",
    "ReleaseDate",
    "Screenshot",
    "Theme",
    "Timestamp",
    "Website",
    "decode_entities",
]
