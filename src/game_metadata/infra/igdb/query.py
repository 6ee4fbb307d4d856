"""APICalypse クエリの構築とレンダリング。

`IGDBQueryBuilder` はフィールド選択・フィルタ・検索・ソート・ページングを
チェーン呼び出しで蓄積し、`render()` で IGDB に送信するクエリ文字列を返す。
句は常に `fields; where; search; sort; limit; offset;` の順で出力され、
一度も設定されていない句は省略される。

`search()` と `sort_by()` は後勝ち。`search` と `where` を併用した場合は
両方をそのまま出力し、優先順位の判断は IGDB 側に委ねる。

`add_where_in()` や `add_where()` に渡した値はエスケープせずそのまま
クエリへ埋め込まれる。文字列リテラルのクォートは呼び出し側の責務。
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from .errors import IGDBInvalidArgumentError

ALL_FIELDS = "*"
IGDB_MAX_LIMIT = 500

FilterValue = str | int | bool
EnumT = TypeVar("EnumT", bound=Enum)


class IGDBOperator(str, Enum):
    """where 句で利用する比較演算子。"""

    EQUAL = "="
    NOT_EQUAL = "!="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_OR_EQUAL = ">="
    LESS_OR_EQUAL = "<="
    CONTAINS_SUBSTRING = "~"
    IN_SET = "in"

    @property
    def token(self) -> str:
        """クエリに出力する演算子トークン。"""

        return "=" if self is IGDBOperator.IN_SET else self.value


class SortOrder(str, Enum):
    """ソート方向。"""

    ASCENDING = "asc"
    DESCENDING = "desc"


def _literal(value: FilterValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(slots=True, frozen=True)
class IGDBFilter:
    """単一のフィルタ述語。"""

    field: str
    operator: IGDBOperator
    value: FilterValue | tuple[str, ...]

    def render(self) -> str:
        if self.operator is IGDBOperator.IN_SET:
            values = self.value if isinstance(self.value, tuple) else (_literal(self.value),)
            return f"{self.field} {self.operator.token} ({','.join(values)})"
        if self.operator is IGDBOperator.CONTAINS_SUBSTRING:
            return f"{self.field} {self.operator.token} *{_quote(_literal(self.value))}*"
        return f"{self.field} {self.operator.token} {_literal(self.value)}"


@dataclass(slots=True, frozen=True)
class IGDBQuery:
    """APICalypse DSL を扱うための構造化クエリ。"""

    fields: tuple[str, ...] = ()
    all_fields: bool = False
    filters: tuple[IGDBFilter, ...] = ()
    search_term: str | None = None
    sort_clause: tuple[str, SortOrder] | None = None
    limit_value: int | None = None
    offset_value: int | None = None

    def to_apicalypse(self) -> str:
        parts: list[str] = []
        if self.all_fields:
            parts.append(f"fields {ALL_FIELDS};")
        elif self.fields:
            parts.append(f"fields {', '.join(self.fields)};")
        if self.filters:
            parts.append(f"where {' & '.join(item.render() for item in self.filters)};")
        if self.search_term is not None:
            parts.append(f"search {_quote(self.search_term)};")
        if self.sort_clause:
            field, direction = self.sort_clause
            parts.append(f"sort {field} {direction.value};")
        if self.limit_value is not None:
            parts.append(f"limit {self.limit_value};")
        if self.offset_value is not None:
            parts.append(f"offset {self.offset_value};")
        return " ".join(parts)


def _require_name(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        msg = f"{what} must be a non-empty string"
        raise IGDBInvalidArgumentError(msg)
    return value.strip()


def _coerce_enum(enum_type: type[EnumT], value: EnumT | str) -> EnumT:
    try:
        return enum_type(value)
    except ValueError as exc:
        msg = f"unsupported {enum_type.__name__}: {value!r}"
        raise IGDBInvalidArgumentError(msg) from exc


def _require_int(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{what} must be an integer (got {value!r})"
        raise IGDBInvalidArgumentError(msg)
    return value


class IGDBQueryBuilder:
    """APICalypse クエリを組み立てるビルダー。"""

    def __init__(self) -> None:
        self._fields: dict[str, None] = {}
        self._all_fields = False
        self._filters: list[IGDBFilter] = []
        self._search: str | None = None
        self._sort: tuple[str, SortOrder] | None = None
        self._limit: int | None = None
        self._offset: int | None = None

    def add_field(self, name: str) -> IGDBQueryBuilder:
        self._fields.setdefault(_require_name(name, "field name"), None)
        return self

    def add_fields(self, names: Iterable[str]) -> IGDBQueryBuilder:
        if isinstance(names, str):
            msg = f"add_fields expects an iterable of field names, got a string: {names!r}"
            raise IGDBInvalidArgumentError(msg)
        for name in names:
            self.add_field(name)
        return self

    def all_fields(self) -> IGDBQueryBuilder:
        """個別フィールド指定より優先してワイルドカードを出力する。"""

        self._all_fields = True
        return self

    def add_where(
        self,
        field: str,
        operator: IGDBOperator,
        value: FilterValue | Sequence[str],
    ) -> IGDBQueryBuilder:
        field = _require_name(field, "where field")
        operator = _coerce_enum(IGDBOperator, operator)
        if isinstance(value, (str, int, bool)):
            stored: FilterValue | tuple[str, ...] = value
        elif operator is IGDBOperator.IN_SET:
            stored = tuple(str(item) for item in value)
        else:
            msg = f"operator {operator.name} does not accept a set of values"
            raise IGDBInvalidArgumentError(msg)
        self._filters.append(IGDBFilter(field=field, operator=operator, value=stored))
        return self

    def contains(self, field: str, value: str) -> IGDBQueryBuilder:
        """部分一致 (`~ *"value"*`) のフィルタを追加する。"""

        return self.add_where(field, IGDBOperator.CONTAINS_SUBSTRING, value)

    def add_where_in(self, field: str, values: Iterable[str]) -> IGDBQueryBuilder:
        """集合への所属フィルタを追加する。値はレンダリング済みのリテラルとして扱う。"""

        values = tuple(values)
        if not values:
            msg = "add_where_in requires at least one value"
            raise IGDBInvalidArgumentError(msg)
        return self.add_where(field, IGDBOperator.IN_SET, values)

    def search(self, term: str) -> IGDBQueryBuilder:
        self._search = _require_name(term, "search term")
        return self

    def sort_by(self, field: str, direction: SortOrder = SortOrder.ASCENDING) -> IGDBQueryBuilder:
        self._sort = (_require_name(field, "sort field"), _coerce_enum(SortOrder, direction))
        return self

    def limit(self, value: int) -> IGDBQueryBuilder:
        value = _require_int(value, "limit")
        if not 1 <= value <= IGDB_MAX_LIMIT:
            msg = f"limit must be between 1 and {IGDB_MAX_LIMIT} (got {value})"
            raise IGDBInvalidArgumentError(msg)
        self._limit = value
        return self

    def offset(self, value: int) -> IGDBQueryBuilder:
        value = _require_int(value, "offset")
        if value < 0:
            msg = f"offset must not be negative (got {value})"
            raise IGDBInvalidArgumentError(msg)
        self._offset = value
        return self

    def build(self) -> IGDBQuery:
        return IGDBQuery(
            fields=tuple(self._fields),
            all_fields=self._all_fields,
            filters=tuple(self._filters),
            search_term=self._search,
            sort_clause=self._sort,
            limit_value=self._limit,
            offset_value=self._offset,
        )

    def render(self) -> str:
        """蓄積した状態をクエリ文字列にする。何も設定していなければ空文字列。"""

        return self.build().to_apicalypse()


__all__ = [
    "ALL_FIELDS",
    "IGDB_MAX_LIMIT",
    "FilterValue",
    "IGDBFilter",
    "IGDBOperator",
    "IGDBQuery",
    "IGDBQueryBuilder",
    "SortOrder",
]
