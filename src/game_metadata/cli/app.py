from __future__ import annotations

import typer

from game_metadata.cli.commands import igdb
from game_metadata.shared.config import get_settings
from game_metadata.shared.exceptions import ConfigurationError
from game_metadata.shared.logging import configure_logging

app = typer.Typer(help="IGDB のゲームメタデータ取得ツールの CLI")

app.add_typer(igdb.app, name="igdb", help="IGDB 関連の操作")


def main() -> None:
    """エントリポイント。"""

    try:
        settings = get_settings()
    except ConfigurationError:
        # 設定不足でも --help は表示できるようにする
        configure_logging()
    else:
        configure_logging(settings.log_level, json_output=settings.log_json)
    app()


if __name__ == "__main__":  # pragma: no cover - CLI エントリ
    main()
