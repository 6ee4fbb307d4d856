"""APICalypse クエリビルダーのレンダリングを検証する。"""

from __future__ import annotations

import pytest

from game_metadata.infra.igdb import (
    IGDBInvalidArgumentError,
    IGDBOperator,
    IGDBQueryBuilder,
    SortOrder,
)
from game_metadata.infra.igdb.query import IGDB_MAX_LIMIT


def test_render_full_scenario() -> None:
    query = (
        IGDBQueryBuilder()
        .add_field("name")
        .contains("name", "Ast")
        .add_where("category", IGDBOperator.NOT_EQUAL, "0")
        .sort_by("name", SortOrder.DESCENDING)
        .limit(3)
    )

    assert query.render() == 'fields name; where name ~ *"Ast"* & category != 0; sort name desc; limit 3;'


def test_empty_builder_renders_empty_query() -> None:
    assert IGDBQueryBuilder().render() == ""


def test_all_fields_only() -> None:
    assert IGDBQueryBuilder().all_fields().render() == "fields *;"


def test_all_fields_overrides_individual_fields() -> None:
    rendered = IGDBQueryBuilder().add_fields(["name", "slug"]).all_fields().add_field("id").render()

    assert rendered == "fields *;"


def test_duplicate_fields_render_once_in_insertion_order() -> None:
    rendered = (
        IGDBQueryBuilder()
        .add_field("name")
        .add_fields(["involved_companies", "name", "cover.image_id"])
        .add_field("involved_companies")
        .render()
    )

    assert rendered == "fields name, involved_companies, cover.image_id;"


def test_add_fields_rejects_bare_string() -> None:
    builder = IGDBQueryBuilder()

    with pytest.raises(IGDBInvalidArgumentError):
        builder.add_fields("name")

    assert builder.render() == ""
    assert rendered.count("name") == 1


@pytest.mark.parametrize(
    ("operator", "value", "expected"),
    [
        (IGDBOperator.EQUAL, "Conan", "where name = Conan;"),
        (IGDBOperator.NOT_EQUAL, 0, "where name != 0;"),
        (IGDBOperator.GREATER_THAN, 10, "where name > 10;"),
        (IGDBOperator.LESS_THAN, "39047", "where name < 39047;"),
        (IGDBOperator.GREATER_OR_EQUAL, 5, "where name >= 5;"),
        (IGDBOperator.LESS_OR_EQUAL, 5, "where name <= 5;"),
        (IGDBOperator.CONTAINS_SUBSTRING, "Zelda", 'where name ~ *"Zelda"*;'),
        (IGDBOperator.EQUAL, True, "where name = true;"),
    ],
)
def test_single_predicate(operator: IGDBOperator, value: object, expected: str) -> None:
    rendered = IGDBQueryBuilder().add_where("name", operator, value).render()

    assert rendered == expected


def test_predicates_are_joined_with_and_in_insertion_order() -> None:
    rendered = (
        IGDBQueryBuilder()
        .add_fields(["name", "involved_companies"])
        .add_where("id", IGDBOperator.LESS_THAN, 39047)
        .add_where("name", IGDBOperator.EQUAL, "Conan")
        .render()
    )

    assert rendered == "fields name, involved_companies; where id < 39047 & name = Conan;"


def test_where_precedes_sort_and_limit() -> None:
    rendered = (
        IGDBQueryBuilder()
        .limit(5)
        .sort_by("name")
        .add_where("platforms", IGDBOperator.EQUAL, 48)
        .render()
    )

    assert rendered == "where platforms = 48; sort name asc; limit 5;"
    assert rendered.index("where") < rendered.index("sort") < rendered.index("limit")


def test_where_in_inserts_values_verbatim() -> None:
    rendered = IGDBQueryBuilder().add_where_in("id", ["1", "2", '"three"']).render()

    assert rendered == 'where id = (1,2,"three");'


def test_where_in_requires_values() -> None:
    with pytest.raises(IGDBInvalidArgumentError):
        IGDBQueryBuilder().add_where_in("id", [])


def test_set_value_rejected_for_scalar_operator() -> None:
    with pytest.raises(IGDBInvalidArgumentError):
        IGDBQueryBuilder().add_where("id", IGDBOperator.EQUAL, ["1", "2"])


def test_contains_escapes_quotes() -> None:
    rendered = IGDBQueryBuilder().contains("name", 'Say "Hi"').render()

    assert rendered == r'where name ~ *"Say \"Hi\""*;'


def test_search_and_where_both_render() -> None:
    rendered = (
        IGDBQueryBuilder()
        .add_field("name")
        .search("Halo")
        .add_where("category", IGDBOperator.EQUAL, 0)
        .render()
    )

    assert rendered == 'fields name; where category = 0; search "Halo";'


def test_search_and_sort_are_last_write_wins() -> None:
    rendered = (
        IGDBQueryBuilder()
        .search("first")
        .search("second")
        .sort_by("name", SortOrder.ASCENDING)
        .sort_by("rating", SortOrder.DESCENDING)
        .render()
    )

    assert rendered == 'search "second"; sort rating desc;'


def test_clause_order_is_fixed() -> None:
    rendered = (
        IGDBQueryBuilder()
        .offset(20)
        .limit(10)
        .sort_by("name", "desc")
        .search("Mario")
        .contains("name", "Kart")
        .add_field("id")
        .render()
    )

    assert rendered == (
        'fields id; where name ~ *"Kart"*; search "Mario"; sort name desc; limit 10; offset 20;'
    )


@pytest.mark.parametrize("value", [0, -1, IGDB_MAX_LIMIT + 1])
def test_limit_out_of_range(value: int) -> None:
    with pytest.raises(IGDBInvalidArgumentError):
        IGDBQueryBuilder().limit(value)


def test_limit_upper_bound_is_accepted() -> None:
    assert IGDBQueryBuilder().limit(IGDB_MAX_LIMIT).render() == f"limit {IGDB_MAX_LIMIT};"


def test_offset_zero_is_rendered() -> None:
    assert IGDBQueryBuilder().offset(0).render() == "offset 0;"


def test_negative_offset_is_rejected() -> None:
    with pytest.raises(IGDBInvalidArgumentError):
        IGDBQueryBuilder().offset(-1)


@pytest.mark.parametrize("value", [True, "10", 2.5])
def test_non_integer_limit_is_rejected(value: object) -> None:
    with pytest.raises(IGDBInvalidArgumentError):
        IGDBQueryBuilder().limit(value)  # type: ignore[arg-type]


def test_invalid_argument_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        IGDBQueryBuilder().limit(0)


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_field_name_is_rejected(name: str) -> None:
    with pytest.raises(IGDBInvalidArgumentError):
        IGDBQueryBuilder().add_field(name)


def test_unknown_sort_direction_is_rejected() -> None:
    with pytest.raises(IGDBInvalidArgumentError):
        IGDBQueryBuilder().sort_by("name", "sideways")  # type: ignore[arg-type]


def test_build_returns_immutable_snapshot() -> None:
    builder = IGDBQueryBuilder().add_field("name").limit(2)
    query = builder.build()

    builder.add_field("slug").limit(4)

    assert query.fields == ("name",)
    assert query.limit_value == 2
    assert query.to_apicalypse() == "fields name; limit 2;"
