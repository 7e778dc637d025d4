from __future__ import annotations

from datetime import datetime, timezone

import pytest

from vault.domain.models import Record, format_value
from vault.domain.query import RecordQuery, SortField, SortOrder
from vault.storage.postgres import search_clause

STAMP = datetime(2024, 3, 1, tzinfo=timezone.utc)


def _record(name: str, value: float) -> Record:
    return Record(id=name, name=name, value=value, created_at=STAMP, updated_at=STAMP)


@pytest.mark.parametrize("term", ["", "  ", None])
def test_blank_terms_build_no_query(term) -> None:
    assert RecordQuery.from_term(term) is None


def test_all_digit_term_enables_numeric_branch() -> None:
    query = RecordQuery.from_term(" 42 ")

    assert query == RecordQuery(name_contains="42", value_equals=42.0)


@pytest.mark.parametrize("term", ["4.2", "-4", "1e3", "42a", "٤٢"])
def test_non_digit_terms_only_match_names(term: str) -> None:
    assert RecordQuery.from_term(term).value_equals is None


def test_matches_is_a_union_of_both_branches() -> None:
    query = RecordQuery.from_term("7")

    assert query.matches(_record("7-Eleven", 1))
    assert query.matches(_record("Lottery", 7))
    assert not query.matches(_record("Unrelated", 70))


def test_search_clause_mirrors_the_two_branches() -> None:
    name_only, params = search_clause(RecordQuery(name_contains="rent"))
    assert name_only == "strpos(lower(name), lower(%s)) > 0"
    assert params == ["rent"]

    both, params = search_clause(RecordQuery(name_contains="7", value_equals=7.0))
    assert both == "strpos(lower(name), lower(%s)) > 0 OR value = %s"
    assert params == ["7", 7.0]


@pytest.mark.parametrize(
    "raw,expected",
    [("Name", SortField.NAME), (" name ", SortField.NAME), ("CreatedAt", SortField.CREATED_AT),
     ("value", SortField.CREATED_AT), ("", SortField.CREATED_AT)],
)
def test_sort_field_parse(raw: str, expected: SortField) -> None:
    assert SortField.parse(raw) is expected


@pytest.mark.parametrize(
    "raw,expected",
    [("Ascending", SortOrder.ASCENDING), ("ASCENDING", SortOrder.ASCENDING),
     ("asc", SortOrder.DESCENDING), ("Descending", SortOrder.DESCENDING),
     ("", SortOrder.DESCENDING)],
)
def test_sort_order_parse(raw: str, expected: SortOrder) -> None:
    assert SortOrder.parse(raw) is expected


@pytest.mark.parametrize("value,text", [(1200.0, "1200"), (3.5, "3.5"), (-0.25, "-0.25")])
def test_format_value_drops_trailing_zero(value: float, text: str) -> None:
    assert format_value(value) == text


def test_last_modified_is_the_update_timestamp() -> None:
    later = STAMP.replace(hour=5)
    record = Record(id="r", name="Rent", value=1, created_at=STAMP, updated_at=later)

    assert record.last_modified == later
