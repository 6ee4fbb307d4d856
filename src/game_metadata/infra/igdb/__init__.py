"""IGDB API 向け infra 層パッケージ。"""

from .auth import (
    IGDBAccessToken,
    IGDBAccessTokenProvider,
    IGDBCredentials,
    IGDBCredentialsProtocol,
    TwitchCredentials,
    TwitchOAuthClient,
)
from .client import ENDPOINT_DESCRIPTORS, IGDBClient, build_igdb_client
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
    IGDBEntity,
    IGDBImage,
    MultiplayerMode,
    Platform,
    PlatformLogo,
    PlayerPerspective,
    ReleaseDate,
    Screenshot,
    Theme,
    Website,
)
from .errors import (
    IGDBClientError,
    IGDBDecodeError,
    IGDBInvalidArgumentError,
    IGDBMediaWriteError,
    IGDBNotFoundError,
    IGDBRateLimitError,
    IGDBTimeoutError,
    IGDBTransportError,
)
from .media import MediaQuality, build_image_url
from .query import IGDBFilter, IGDBOperator, IGDBQuery, IGDBQueryBuilder, SortOrder
from .transport import (
    HttpxTransport,
    IGDBTransportProtocol,
    IGDBWrapperProtocol,
    IGDBWrapperTransport,
)

__all__ = [
    "ENDPOINT_DESCRIPTORS",
    "AgeRating",
    "Artwork",
    "Character",
    "CharacterMugShot",
    "Company",
    "Cover",
    "Franchise",
    "Game",
    "GameEngine",
    "GameMode",
    "GameVideo",
    "HttpxTransport",
    "IGDBAccessToken",
    "IGDBAccessTokenProvider",
    "IGDBClient",
    "IGDBClientError",
    "IGDBCredentials",
    "IGDBCredentialsProtocol",
    "IGDBDecodeError",
    "IGDBEndpoint",
    "IGDBEndpointDescriptor",
    "IGDBEntity",
    "IGDBFilter",
    "IGDBImage",
    "IGDBInvalidArgumentError",
    "IGDBMediaEndpoint",
    "IGDBMediaWriteError",
    "IGDBNotFoundError",
    "IGDBOperator",
    "IGDBQuery",
    "IGDBQueryBuilder",
    "IGDBRateLimitError",
    "IGDBTimeoutError",
    "IGDBTransportError",
    "IGDBTransportProtocol",
    "IGDBWrapperProtocol",
    "IGDBWrapperTransport",
    "MediaQuality",
    "MultiplayerMode",
    "Platform",
    "PlatformLogo",
    "PlayerPerspective",
    "ReleaseDate",
    "Screenshot",
    "SortOrder",
    "Theme",
    "TwitchCredentials",
    "TwitchOAuthClient",
    "Website",
    "build_igdb_client",
    "build_image_url",
]
