from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from game_metadata.infra.igdb import (
    ENDPOINT_DESCRIPTORS,
    Game,
    IGDBClientError,
    IGDBEntity,
    IGDBMediaEndpoint,
    IGDBNotFoundError,
    IGDBOperator,
    IGDBQueryBuilder,
    IGDBRateLimitError,
    MediaQuality,
    SortOrder,
    build_igdb_client,
)
from game_metadata.shared.logging import get_logger

SEARCH_FIELDS = (
    "id",
    "name",
    "slug",
    "summary",
    "first_release_date",
    "cover",
    "platforms",
    "category",
)


class TitleMatch(str, Enum):
    """タイトルマッチの方法。"""

    SEARCH = "search"
    CONTAINS = "contains"
    EXACT = "exact"


class OutputFormat(str, Enum):
    """出力形式。"""

    TABLE = "table"
    JSON = "json"


app = typer.Typer(help="IGDB の検索・取得コマンド")


def _build_search_query(title: str, match: TitleMatch, limit: int, offset: int) -> IGDBQueryBuilder:
    builder = IGDBQueryBuilder().add_fields(SEARCH_FIELDS).limit(limit).offset(offset)

    if match is TitleMatch.SEARCH:
        builder.search(title)
    elif match is TitleMatch.CONTAINS:
        builder.contains("name", title)
        builder.sort_by("first_release_date", SortOrder.DESCENDING)
    elif match is TitleMatch.EXACT:
        builder.add_where("name", IGDBOperator.EQUAL, json.dumps(title, ensure_ascii=False))
        builder.sort_by("first_release_date", SortOrder.DESCENDING)

    return builder


def _format_date(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.date().isoformat()


def _format_sequence(values: tuple[int, ...]) -> str:
    return ", ".join(str(item) for item in values) if values else "-"


def _entity_to_dict(entity: IGDBEntity) -> dict[str, Any]:
    return entity.model_dump(mode="json")


def _render_games_table(items: Iterable[Game]) -> None:
    console = Console(force_terminal=False, color_system=None)
    table = Table(title="IGDB Title Search")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Slug")
    table.add_column("Release")
    table.add_column("Platforms")
    table.add_column("Cover")

    for game in items:
        table.add_row(
            str(game.id),
            game.name,
            game.slug or "-",
            _format_date(game.first_release_date),
            _format_sequence(game.platforms),
            str(game.cover) if game.cover is not None else "-",
        )

    console.print(table)


def _render_entity_table(entity: IGDBEntity) -> None:
    console = Console(force_terminal=False, color_system=None)
    table = Table(title=f"{type(entity).__name__} {entity.id}")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")

    for key, value in _entity_to_dict(entity).items():
        if value in ("", None, []):
            continue
        table.add_row(key, str(value))

    console.print(table)


def _render_json(items: Iterable[IGDBEntity]) -> None:
    payload = [_entity_to_dict(item) for item in items]
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _fail(logger, exc: IGDBClientError) -> typer.Exit:
    if isinstance(exc, IGDBRateLimitError):
        logger.warning("IGDB API rate limited", error=str(exc))
        typer.echo("IGDB API のレート制限に到達しました。時間をおいて再実行してください。")
        return typer.Exit(code=2)
    if isinstance(exc, IGDBNotFoundError):
        logger.info("IGDB エンティティが見つからない", error=str(exc))
        typer.echo(f"該当するデータが見つかりませんでした: {exc}")
        return typer.Exit(code=3)
    logger.error("IGDB リクエストに失敗", error=str(exc))
    typer.echo(f"IGDB リクエストに失敗しました: {exc}")
    return typer.Exit(code=1)


def _validate_endpoint(value: str) -> str:
    if value not in ENDPOINT_DESCRIPTORS:
        choices = ", ".join(sorted(ENDPOINT_DESCRIPTORS))
        raise typer.BadParameter(f"{value} は未対応です ({choices})")
    return value


@app.command()
def search(  # noqa: PLR0913 - CLI のため引数が多い
    title: Annotated[str, typer.Option("--title", "-t", help="検索するゲームタイトル")] = ...,
    match: Annotated[
        TitleMatch,
        typer.Option(
            "--match",
            "-m",
            case_sensitive=False,
            help="search/contains/exact から指定",
        ),
    ] = TitleMatch.SEARCH,
    limit: Annotated[int, typer.Option("--limit", "-l", min=1, max=500, help="取得する件数")] = 10,
    offset: Annotated[int, typer.Option("--offset", "-o", min=0, help="取得開始位置")] = 0,
    output: Annotated[
        OutputFormat,
        typer.Option(
            "--output",
            "-f",
            case_sensitive=False,
            help="出力形式(table/json)",
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """IGDB のタイトル検索を実行する。"""

    logger = get_logger("cli.igdb.search", title=title)
    query = _build_search_query(title, match, limit, offset)
    try:
        with build_igdb_client(logger=logger) as client:
            games = client.games().get(query)
    except IGDBClientError as exc:
        raise _fail(logger, exc) from exc

    logger.info("IGDB 検索完了", results=len(games))

    if output is OutputFormat.JSON:
        _render_json(games)
    else:
        _render_games_table(games)


@app.command()
def get(
    endpoint: Annotated[
        str,
        typer.Argument(help="エンドポイント名 (games, platforms など)", callback=_validate_endpoint),
    ],
    entity_id: Annotated[int, typer.Option("--id", "-i", min=1, help="取得する ID")] = ...,
    output: Annotated[
        OutputFormat,
        typer.Option("--output", "-f", case_sensitive=False, help="出力形式(table/json)"),
    ] = OutputFormat.TABLE,
) -> None:
    """ID を指定してエンティティを 1 件取得する。"""

    logger = get_logger("cli.igdb.get", endpoint=endpoint, entity_id=entity_id)
    try:
        with build_igdb_client(logger=logger) as client:
            entity = client.endpoint(endpoint).get_first_by_id(entity_id)
    except IGDBClientError as exc:
        raise _fail(logger, exc) from exc

    if output is OutputFormat.JSON:
        _render_json((entity,))
    else:
        _render_entity_table(entity)


@app.command()
def download(
    endpoint: Annotated[
        str,
        typer.Argument(help="画像系エンドポイント名 (covers, screenshots など)", callback=_validate_endpoint),
    ],
    entity_id: Annotated[int, typer.Option("--id", "-i", min=1, help="画像エンティティの ID")] = ...,
    dest: Annotated[Path, typer.Option("--dest", "-d", help="保存先のファイルパス")] = ...,
    quality: Annotated[
        MediaQuality,
        typer.Option("--quality", "-q", case_sensitive=False, help="画像サイズ"),
    ] = MediaQuality.COVER_BIG,
    retina: Annotated[bool, typer.Option("--retina", help="倍解像度で取得する")] = False,
) -> None:
    """画像をダウンロードしてファイルに保存する。"""

    logger = get_logger("cli.igdb.download", endpoint=endpoint, entity_id=entity_id)
    with build_igdb_client(logger=logger) as client:
        media = client.endpoint(endpoint)
        if not isinstance(media, IGDBMediaEndpoint):
            typer.echo(f"{endpoint} は画像をダウンロードできないエンドポイントです")
            raise typer.Exit(code=1)

        try:
            path = media.download_by_id(entity_id, dest, quality, retina=retina)
        except IGDBClientError as exc:
            raise _fail(logger, exc) from exc

    logger.info("画像を保存", path=str(path))
    typer.echo(f"保存しました: {path}")
