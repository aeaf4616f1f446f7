"""Deterministic SQL builder.

The builder converts a `TransactionFilter` into a parameterized SQL query over the `transactions`
table. Identifiers are strictly allowlisted; only values become bound parameters. All calendar days
are interpreted as UTC days and compared through half-open intervals.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Any

from src.search.schema import EntityRef, TransactionFilter
from src.sql.columns import (
    AMOUNT_COLUMN,
    CREATED_AT_COLUMN,
    DATE_COLUMN,
    ENTITY_COLUMNS,
    EXTERNAL_ID_COLUMN,
    INTERNAL_REFERENCE_COLUMN,
    SELECT_COLUMNS,
    TEXT_SEARCH_COLUMN,
    TRANSACTION_TAGS_TABLE,
    TRANSACTIONS_TABLE,
    TYPE_COLUMN,
    UPDATED_AT_COLUMN,
)


class SQLBuilderError(ValueError):
    """Raised when a filter cannot be converted into deterministic SQL."""


@dataclass(frozen=True)
class BuiltQuery:
    """A parameterized SQL query ready for execution."""

    sql: str
    params: tuple[Any, ...]


def inclusive_dates_to_half_open(start: date, end: date) -> tuple[datetime, datetime]:
    """Convert inclusive day range into a half-open UTC datetime interval."""

    start_dt = datetime.combine(start, time.min, tzinfo=UTC)
    end_dt = datetime.combine(end + timedelta(days=1), time.min, tzinfo=UTC)
    return start_dt, end_dt


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so user text only ever matches literally."""

    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _where_and(clauses: list[str]) -> str:
    if not clauses:
        return ""
    return "WHERE " + " AND ".join(clauses)


def _ids(entities: Iterable[EntityRef]) -> list[int]:
    return [e.id for e in entities]


def _append_day_window(
        clauses: list[str],
        params: list[Any],
        column: str,
        *,
        start: date | None,
        end: date | None,
) -> None:
    if start is not None:
        start_dt, _ = inclusive_dates_to_half_open(start, start)
        clauses.append(f"t.{column} >= %s")
        params.append(start_dt)
    if end is not None:
        _, end_dt = inclusive_dates_to_half_open(end, end)
        clauses.append(f"t.{column} < %s")
        params.append(end_dt)


def _filter_clauses(filters: TransactionFilter) -> tuple[list[str], list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []

    for word in filters.free_text_words:
        clauses.append(f"t.{TEXT_SEARCH_COLUMN} ILIKE %s")
        params.append(f"%{escape_like(word)}%")

    for attribute, column in ENTITY_COLUMNS.items():
        entities = getattr(filters, attribute)
        if entities:
            clauses.append(f"t.{column} = ANY(%s)")
            params.append(_ids(entities))

    if filters.tags:
        clauses.append(
            f"EXISTS (SELECT 1 FROM {TRANSACTION_TAGS_TABLE} tt "
            "WHERE tt.transaction_id = t.id AND tt.tag_id = ANY(%s))"
        )
        params.append(_ids(filters.tags))

    # Amounts are stored signed; bounds are positive magnitudes.
    if filters.amount_equals is not None:
        clauses.append(f"ABS(t.{AMOUNT_COLUMN}) = %s")
        params.append(filters.amount_equals)
    if filters.amount_min is not None:
        clauses.append(f"ABS(t.{AMOUNT_COLUMN}) >= %s")
        params.append(filters.amount_min)
    if filters.amount_max is not None:
        clauses.append(f"ABS(t.{AMOUNT_COLUMN}) <= %s")
        params.append(filters.amount_max)

    if filters.date_range is not None:
        _append_day_window(
            clauses,
            params,
            DATE_COLUMN,
            start=filters.date_range.start_date,
            end=filters.date_range.end_date,
        )
    _append_day_window(
        clauses, params, DATE_COLUMN, start=filters.date_after, end=filters.date_before
    )
    _append_day_window(
        clauses, params, CREATED_AT_COLUMN, start=filters.created_on, end=filters.created_on
    )
    _append_day_window(
        clauses, params, UPDATED_AT_COLUMN, start=filters.updated_on, end=filters.updated_on
    )

    if filters.types:
        clauses.append(f"t.{TYPE_COLUMN} = ANY(%s)")
        params.append(list(filters.types))

    if filters.external_id is not None:
        clauses.append(f"t.{EXTERNAL_ID_COLUMN} = %s")
        params.append(filters.external_id)
    if filters.internal_reference is not None:
        clauses.append(f"t.{INTERNAL_REFERENCE_COLUMN} = %s")
        params.append(filters.internal_reference)

    return clauses, params


def build_search_query(
        filters: TransactionFilter,
        *,
        page: int = 1,
        page_size: int = 50,
) -> BuiltQuery:
    """Build a paginated transaction query for `filters`.

    Raises:
        SQLBuilderError: If `page` or `page_size` is smaller than 1.
    """

    if page < 1:
        raise SQLBuilderError("page must be >= 1")
    if page_size < 1:
        raise SQLBuilderError("page_size must be >= 1")

    clauses, params = _filter_clauses(filters)
    columns = ", ".join(f"t.{c}" for c in SELECT_COLUMNS)
    sql = (
        f"SELECT {columns} FROM {TRANSACTIONS_TABLE} t {_where_and(clauses)} "
        f"ORDER BY t.{DATE_COLUMN} DESC, t.id DESC LIMIT %s OFFSET %s"
    )
    params.extend([page_size, (page - 1) * page_size])
    return BuiltQuery(sql=" ".join(sql.split()), params=tuple(params))


def build_count_query(filters: TransactionFilter) -> BuiltQuery:
    """Build a scalar query counting every transaction matching `filters`."""

    clauses, params = _filter_clauses(filters)
    sql = f"SELECT COUNT(*)::bigint FROM {TRANSACTIONS_TABLE} t {_where_and(clauses)}".strip()
    return BuiltQuery(sql=sql, params=tuple(params))
