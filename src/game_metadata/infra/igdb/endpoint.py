"""エンティティ型に束縛された汎用 IGDB エンドポイントクライアント。"""

from __future__ import annotations

import os
import tempfile
from contextlib import closing
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path
from typing import Generic

from game_metadata.shared.logging import get_logger

from .auth import IGDBCredentialsProtocol
from .entities import EntityT, IGDBImage, decode_entities
from .errors import IGDBInvalidArgumentError, IGDBMediaWriteError, IGDBNotFoundError
from .media import MediaQuality, build_image_url
from .query import IGDBOperator, IGDBQuery, IGDBQueryBuilder
from .transport import IGDBTransportProtocol

DEFAULT_LIMIT = 10


@dataclass(slots=True, frozen=True)
class IGDBEndpointDescriptor(Generic[EntityT]):
    """リソースのパスとレスポンスのエンティティ型。"""

    path: str
    entity_type: type[EntityT]

    def has_attribute(self, name: str) -> bool:
        return name in self.entity_type.model_fields


class IGDBEndpoint(Generic[EntityT]):
    """1 つのリソースに対してクエリを実行するクライアント。

    状態を持たないため、同じインスタンスを複数スレッドから並行に利用できる。
    """

    def __init__(
        self,
        descriptor: IGDBEndpointDescriptor[EntityT],
        *,
        transport: IGDBTransportProtocol,
        credentials: IGDBCredentialsProtocol,
        timeout: float | None = None,
        logger=None,
    ) -> None:
        self._descriptor = descriptor
        self._transport = transport
        self._credentials = credentials
        self._timeout = timeout
        self._logger = logger or get_logger(__name__, endpoint=descriptor.path)

    @property
    def descriptor(self) -> IGDBEndpointDescriptor[EntityT]:
        return self._descriptor

    def get(
        self,
        query: IGDBQueryBuilder | IGDBQuery,
        *,
        timeout: float | None = None,
    ) -> tuple[EntityT, ...]:
        """クエリを実行してエンティティを返す。該当なしは空タプル。"""

        body = query.render() if isinstance(query, IGDBQueryBuilder) else query.to_apicalypse()
        self._logger.debug("igdb_request", query=body)
        payload = self._transport.post(
            self._descriptor.path,
            body,
            headers=self._credentials.auth_headers(),
            timeout=timeout if timeout is not None else self._timeout,
        )
        entities = decode_entities(payload, self._descriptor.entity_type)
        self._logger.debug("igdb_response", results=len(entities))
        return entities

    def get_by_id(self, entity_id: int, limit: int = DEFAULT_LIMIT) -> tuple[EntityT, ...]:
        query = (
            IGDBQueryBuilder()
            .all_fields()
            .add_where("id", IGDBOperator.EQUAL, entity_id)
            .limit(limit)
        )
        return self.get(query)

    def get_first_by_id(self, entity_id: int) -> EntityT:
        return self._first(self.get_by_id(entity_id, limit=1), f"id={entity_id}")

    def get_by_name(self, name: str, limit: int = DEFAULT_LIMIT) -> tuple[EntityT, ...]:
        self._require_attribute("name")
        query = IGDBQueryBuilder().all_fields().contains("name", name).limit(limit)
        return self.get(query)

    def get_first_by_name(self, name: str) -> EntityT:
        return self._first(self.get_by_name(name, limit=1), f"name~{name!r}")

    def get_by_game_id(self, game_id: int, limit: int = DEFAULT_LIMIT) -> tuple[EntityT, ...]:
        self._require_attribute("game")
        query = (
            IGDBQueryBuilder()
            .all_fields()
            .add_where("game", IGDBOperator.EQUAL, game_id)
            .limit(limit)
        )
        return self.get(query)

    def _first(self, entities: tuple[EntityT, ...], criteria: str) -> EntityT:
        if not entities:
            msg = f"No {self._descriptor.path} entity matched {criteria}"
            raise IGDBNotFoundError(msg)
        return entities[0]

    def _require_attribute(self, name: str) -> None:
        if not self._descriptor.has_attribute(name):
            msg = f"{self._descriptor.entity_type.__name__} has no `{name}` attribute"
            raise IGDBInvalidArgumentError(msg)


class IGDBMediaEndpoint(IGDBEndpoint[EntityT]):
    """画像を持つリソース (カバー、スクリーンショットなど) 用のクライアント。"""

    def download_by_id(
        self,
        entity_id: int,
        destination: str | os.PathLike[str],
        quality: MediaQuality,
        *,
        retina: bool = False,
        timeout: float | None = None,
    ) -> Path:
        """画像をダウンロードして `destination` に保存する。

        一時ファイルに書き込んでから置き換えるため、失敗時に `destination` へ
        中途半端なファイルが残ることはない。
        """

        query = (
            IGDBQueryBuilder()
            .add_field("image_id")
            .add_where("id", IGDBOperator.EQUAL, entity_id)
            .limit(1)
        )
        image = self._first(self.get(query, timeout=timeout), f"id={entity_id}")
        if not isinstance(image, IGDBImage) or not image.image_id:
            msg = f"{self._descriptor.path} id={entity_id} has no image"
            raise IGDBNotFoundError(msg)

        url = build_image_url(image.image_id, quality, retina=retina)
        target = Path(destination)
        self._logger.info("igdb_media_download", entity_id=entity_id, url=url, path=str(target))
        return self._write_atomically(target, self._transport.iter_bytes(url, timeout=timeout))

    def _write_atomically(self, target: Path, chunks: Generator[bytes, None, None]) -> Path:
        with closing(chunks):
            try:
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{target.name}.", suffix=".part", dir=target.parent
                )
            except OSError as exc:
                msg = f"Cannot create file in {target.parent}: {exc}"
                raise IGDBMediaWriteError(msg) from exc

            tmp_path = Path(tmp_name)
            try:
                try:
                    with os.fdopen(fd, "wb") as handle:
                        for chunk in chunks:
                            handle.write(chunk)
                    os.replace(tmp_path, target)
                except OSError as exc:
                    raise IGDBMediaWriteError(f"Cannot write media to {target}: {exc}") from exc
            except BaseException:
                tmp_path.unlink(missing_ok=True)
                raise
        return target


__all__ = [
    "DEFAULT_LIMIT",
    "IGDBEndpoint",
    "IGDBEndpointDescriptor",
    "IGDBMediaEndpoint",
]
