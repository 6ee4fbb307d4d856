"""IGDB API のルートクライアント。

認証情報とトランスポートを 1 か所で保持し、リソースごとに型付けされた
`IGDBEndpoint` を生成するファクトリとして振る舞う。
"""

from __future__ import annotations

from datetime import timedelta

from game_metadata.shared.config import AppSettings, get_settings
from game_metadata.shared.logging import get_logger

from .auth import (
    IGDBAccessTokenProvider,
    IGDBCredentials,
    IGDBCredentialsProtocol,
    TwitchCredentials,
    TwitchOAuthClient,
)
from .endpoint import IGDBEndpoint, IGDBEndpointDescriptor, IGDBMediaEndpoint
from .entities import (
    AgeRating,
    Artwork,
    Character,
    CharacterMugShot,
    Company,
    Cover,
    Franchise,
    Game,
    GameEngine,
    GameMode,
    GameVideo,
    MultiplayerMode,
    Platform,
    PlatformLogo,
    PlayerPerspective,
    ReleaseDate,
    Screenshot,
    Theme,
    Website,
)
from .errors import IGDBInvalidArgumentError
from .query import IGDBQueryBuilder
from .transport import HttpxTransport, IGDBTransportProtocol, IGDBWrapperTransport

GAMES = IGDBEndpointDescriptor("games", Game)
CHARACTERS = IGDBEndpointDescriptor("characters", Character)
PLATFORMS = IGDBEndpointDescriptor("platforms", Platform)
COVERS = IGDBEndpointDescriptor("covers", Cover)
SCREENSHOTS = IGDBEndpointDescriptor("screenshots", Screenshot)
GAME_ENGINES = IGDBEndpointDescriptor("game_engines", GameEngine)
FRANCHISES = IGDBEndpointDescriptor("franchises", Franchise)
RELEASE_DATES = IGDBEndpointDescriptor("release_dates", ReleaseDate)
MULTIPLAYER_MODES = IGDBEndpointDescriptor("multiplayer_modes", MultiplayerMode)
THEMES = IGDBEndpointDescriptor("themes", Theme)
WEBSITES = IGDBEndpointDescriptor("websites", Website)
AGE_RATINGS = IGDBEndpointDescriptor("age_ratings", AgeRating)
COMPANIES = IGDBEndpointDescriptor("companies", Company)
ARTWORKS = IGDBEndpointDescriptor("artworks", Artwork)
GAME_MODES = IGDBEndpointDescriptor("game_modes", GameMode)
PLAYER_PERSPECTIVES = IGDBEndpointDescriptor("player_perspectives", PlayerPerspective)
CHARACTER_MUG_SHOTS = IGDBEndpointDescriptor("character_mug_shots", CharacterMugShot)
PLATFORM_LOGOS = IGDBEndpointDescriptor("platform_logos", PlatformLogo)
GAME_VIDEOS = IGDBEndpointDescriptor("game_videos", GameVideo)

MEDIA_DESCRIPTORS = (COVERS, SCREENSHOTS, ARTWORKS, CHARACTER_MUG_SHOTS, PLATFORM_LOGOS)
ENDPOINT_DESCRIPTORS: dict[str, IGDBEndpointDescriptor] = {
    descriptor.path: descriptor
    for descriptor in (
        GAMES,
        CHARACTERS,
        PLATFORMS,
        COVERS,
        SCREENSHOTS,
        GAME_ENGINES,
        FRANCHISES,
        RELEASE_DATES,
        MULTIPLAYER_MODES,
        THEMES,
        WEBSITES,
        AGE_RATINGS,
        COMPANIES,
        ARTWORKS,
        GAME_MODES,
        PLAYER_PERSPECTIVES,
        CHARACTER_MUG_SHOTS,
        PLATFORM_LOGOS,
        GAME_VIDEOS,
    )
}


class IGDBClient:
    """認証情報を保持し、エンドポイントごとのクライアントを生成する。

    構築時に通信は発生しない。トランスポートを渡さなかった場合は最初の
    エンドポイント生成時に `HttpxTransport` を組み立てる。
    自前で組み立てたトランスポートは `close()` (または `with` ブロックの終了) で閉じる。
    """

    def __init__(
        self,
        credentials: IGDBCredentialsProtocol,
        *,
        transport: IGDBTransportProtocol | None = None,
        timeout: float | None = None,
        owns_transport: bool | None = None,
        logger=None,
    ) -> None:
        self._credentials = credentials
        self._transport = transport
        self._timeout = timeout
        self._owns_transport = transport is None if owns_transport is None else owns_transport
        self._logger = logger or get_logger(__name__)

    def __enter__(self) -> IGDBClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def transport(self) -> IGDBTransportProtocol:
        if self._transport is None:
            self._transport = HttpxTransport(logger=self._logger)
        return self._transport

    def close(self) -> None:
        """このクライアントが組み立てたトランスポートを閉じる。"""

        if not self._owns_transport or self._transport is None:
            return
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    @staticmethod
    def create_request() -> IGDBQueryBuilder:
        """どのエンドポイントでも使える空のクエリビルダーを返す。"""

        return IGDBQueryBuilder()

    def endpoint(self, path: str) -> IGDBEndpoint:
        """パス名からエンドポイントクライアントを返す。"""

        try:
            descriptor = ENDPOINT_DESCRIPTORS[path]
        except KeyError as exc:
            msg = f"Unknown IGDB endpoint: {path}"
            raise IGDBInvalidArgumentError(msg) from exc
        if descriptor in MEDIA_DESCRIPTORS:
            return self._media(descriptor)
        return self._bind(descriptor)

    def games(self) -> IGDBEndpoint[Game]:
        return self._bind(GAMES)

    def characters(self) -> IGDBEndpoint[Character]:
        return self._bind(CHARACTERS)

    def platforms(self) -> IGDBEndpoint[Platform]:
        return self._bind(PLATFORMS)

    def covers(self) -> IGDBMediaEndpoint[Cover]:
        return self._media(COVERS)

    def screenshots(self) -> IGDBMediaEndpoint[Screenshot]:
        return self._media(SCREENSHOTS)

    def game_engines(self) -> IGDBEndpoint[GameEngine]:
        return self._bind(GAME_ENGINES)

    def franchises(self) -> IGDBEndpoint[Franchise]:
        return self._bind(FRANCHISES)

    def release_dates(self) -> IGDBEndpoint[ReleaseDate]:
        return self._bind(RELEASE_DATES)

    def multiplayer_modes(self) -> IGDBEndpoint[MultiplayerMode]:
        return self._bind(MULTIPLAYER_MODES)

    def themes(self) -> IGDBEndpoint[Theme]:
        return self._bind(THEMES)

    def websites(self) -> IGDBEndpoint[Website]:
        return self._bind(WEBSITES)

    def age_ratings(self) -> IGDBEndpoint[AgeRating]:
        return self._bind(AGE_RATINGS)

    def companies(self) -> IGDBEndpoint[Company]:
        return self._bind(COMPANIES)

    def artworks(self) -> IGDBMediaEndpoint[Artwork]:
        return self._media(ARTWORKS)

    def game_modes(self) -> IGDBEndpoint[GameMode]:
        return self._bind(GAME_MODES)

    def player_perspectives(self) -> IGDBEndpoint[PlayerPerspective]:
        return self._bind(PLAYER_PERSPECTIVES)

    def character_mug_shots(self) -> IGDBMediaEndpoint[CharacterMugShot]:
        return self._media(CHARACTER_MUG_SHOTS)

    def platform_logos(self) -> IGDBMediaEndpoint[PlatformLogo]:
        return self._media(PLATFORM_LOGOS)

    def game_videos(self) -> IGDBEndpoint[GameVideo]:
        return self._bind(GAME_VIDEOS)

    def _bind(self, descriptor: IGDBEndpointDescriptor) -> IGDBEndpoint:
        return IGDBEndpoint(
            descriptor,
            transport=self.transport,
            credentials=self._credentials,
            timeout=self._timeout,
        )

    def _media(self, descriptor: IGDBEndpointDescriptor) -> IGDBMediaEndpoint:
        return IGDBMediaEndpoint(
            descriptor,
            transport=self.transport,
            credentials=self._credentials,
            timeout=self._timeout,
        )


def build_credentials(settings: AppSettings) -> IGDBCredentialsProtocol:
    """設定から認証情報を組み立てる。アクセストークンがあればそれを優先する。"""

    igdb_settings = settings.igdb
    if igdb_settings.access_token is not None:
        return IGDBCredentials(
            client_id=igdb_settings.client_id,
            access_token=igdb_settings.access_token.get_secret_value(),
        )

    oauth_client = TwitchOAuthClient(
        client_id=igdb_settings.client_id,
        client_secret=igdb_settings.client_secret.get_secret_value(),
        token_url=str(igdb_settings.token_url),
        timeout=igdb_settings.timeout_seconds,
    )
    token_provider = IGDBAccessTokenProvider(
        oauth_client=oauth_client,
        refresh_margin=timedelta(seconds=igdb_settings.refresh_margin_seconds),
    )
    return TwitchCredentials(client_id=igdb_settings.client_id, token_provider=token_provider)


def build_transport(settings: AppSettings, *, logger=None) -> IGDBTransportProtocol:
    """設定で指定されたトランスポートを生成する。"""

    igdb_settings = settings.igdb
    if igdb_settings.transport == "wrapper":
        return IGDBWrapperTransport(timeout=igdb_settings.timeout_seconds, logger=logger)
    return HttpxTransport(
        base_url=str(igdb_settings.api_url),
        timeout=igdb_settings.timeout_seconds,
        logger=logger,
    )


def build_igdb_client(
    *,
    settings: AppSettings | None = None,
    transport: IGDBTransportProtocol | None = None,
    logger=None,
) -> IGDBClient:
    """共有設定から IGDB クライアントを構築するファクトリ。"""

    app_settings = settings or get_settings()
    return IGDBClient(
        build_credentials(app_settings),
        transport=transport or build_transport(app_settings, logger=logger),
        timeout=app_settings.igdb.timeout_seconds,
        owns_transport=transport is None,
        logger=logger,
    )


__all__ = [
    "ENDPOINT_DESCRIPTORS",
    "MEDIA_DESCRIPTORS",
    "IGDBClient",
    "build_credentials",
    "build_igdb_client",
    "build_transport",
]
