"""Tests for the deterministic SQL builder (allowlists + parameter binding)."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.search.schema import AccountKind, AccountRef, DateRange, EntityRef, TransactionFilter
from src.sql.builder import (
    SQLBuilderError,
    build_count_query,
    build_search_query,
    escape_like,
    inclusive_dates_to_half_open,
)


def _placeholder_count(sql: str) -> int:
    return sql.count("%s")


def test_build_search_query_no_filters() -> None:
    built = build_search_query(TransactionFilter())

    assert built.sql.startswith("SELECT t.id, t.date, t.description")
    assert "FROM transactions t" in built.sql
    assert "WHERE" not in built.sql
    assert built.sql.endswith("ORDER BY t.date DESC, t.id DESC LIMIT %s OFFSET %s")
    assert built.params == (50, 0)


def test_pagination_offsets() -> None:
    built = build_search_query(TransactionFilter(), page=3, page_size=20)

    assert built.params == (20, 40)


@pytest.mark.parametrize(("page", "page_size"), [(0, 50), (1, 0), (-1, 10)])
def test_invalid_pagination(page: int, page_size: int) -> None:
    with pytest.raises(SQLBuilderError):
        build_search_query(TransactionFilter(), page=page, page_size=page_size)


def test_words_become_escaped_ilike_parameters() -> None:
    built = build_count_query(TransactionFilter(free_text_words=("dinner", "100%")))

    assert built.sql == (
        "SELECT COUNT(*)::bigint FROM transactions t "
        "WHERE t.description ILIKE %s AND t.description ILIKE %s"
    )
    assert built.params == ("%dinner%", "%100\\%%")


def test_entity_sets_bind_id_lists() -> None:
    filters = TransactionFilter(
        source_accounts=(AccountRef(id=1, name="Checking", kind=AccountKind.asset),),
        destination_accounts=(AccountRef(id=4, name="Supermarket", kind=AccountKind.expense),),
        categories=(EntityRef(id=10, name="Groceries"), EntityRef(id=11, name="Eating out")),
        tags=(EntityRef(id=40, name="holiday"),),
    )

    built = build_count_query(filters)

    assert "t.source_account_id = ANY(%s)" in built.sql
    assert "t.destination_account_id = ANY(%s)" in built.sql
    assert "t.category_id = ANY(%s)" in built.sql
    assert "tt.transaction_id = t.id AND tt.tag_id = ANY(%s)" in built.sql
    assert "Checking" not in built.sql
    assert built.params == ([1], [4], [10, 11], [40])


def test_amount_bounds_compare_magnitudes() -> None:
    filters = TransactionFilter(
        amount_equals=Decimal("5"), amount_min=Decimal("1"), amount_max=Decimal("9")
    )

    built = build_count_query(filters)

    assert "ABS(t.amount) = %s" in built.sql
    assert "ABS(t.amount) >= %s" in built.sql
    assert "ABS(t.amount) <= %s" in built.sql
    assert built.params == (Decimal("5"), Decimal("1"), Decimal("9"))


def test_single_day_range_is_half_open() -> None:
    filters = TransactionFilter(
        date_range=DateRange(start_date=date(2020, 1, 15), end_date=date(2020, 1, 15))
    )

    built = build_count_query(filters)

    assert "t.date >= %s AND t.date < %s" in built.sql
    assert built.params[0].isoformat() == "2020-01-15T00:00:00+00:00"
    assert built.params[1].isoformat() == "2020-01-16T00:00:00+00:00"


def test_before_after_created_updated_and_literals() -> None:
    filters = TransactionFilter(
        date_after=date(2021, 1, 1),
        date_before=date(2021, 12, 31),
        created_on=date(2021, 2, 2),
        updated_on=date(2021, 2, 3),
        types=("Withdrawal",),
        external_id="ext-1",
        internal_reference="REF",
    )

    built = build_search_query(filters)

    assert "t.created_at >= %s AND t.created_at < %s" in built.sql
    assert "t.updated_at >= %s AND t.updated_at < %s" in built.sql
    assert "t.type = ANY(%s)" in built.sql
    assert "t.external_id = %s" in built.sql
    assert "t.internal_reference = %s" in built.sql
    assert "ext-1" not in built.sql
    assert built.params[1].isoformat() == "2022-01-01T00:00:00+00:00"
    assert _placeholder_count(built.sql) == len(built.params)


def test_escape_like() -> None:
    assert escape_like(r"a_b%c\d") == r"a\_b\%c\\d"


def test_inclusive_to_half_open_conversion() -> None:
    start_dt, end_dt = inclusive_dates_to_half_open(date(2025, 11, 1), date(2025, 11, 5))

    assert start_dt.isoformat() == "2025-11-01T00:00:00+00:00"
    assert end_dt.isoformat() == "2025-11-06T00:00:00+00:00"
