"""Safe DB query helpers.

These helpers never interpolate user values into SQL; every value is passed via `params`. DB errors
are not swallowed (the caller decides how to handle them).
"""

from __future__ import annotations

from typing import Any, LiteralString, cast

import psycopg


def fetch_scalar_int(conn: psycopg.Connection, sql: str, params: tuple[Any, ...] = ()) -> int:
    """Execute a scalar query and return an `int`.

    Contract:
        - Returns `0` if the query yields no rows or the first column is NULL.
        - The query must be parameterized; all values are passed via `params`.
    """

    with conn.cursor() as cur:
        cur.execute(cast(LiteralString, sql), params)
        row = cur.fetchone()

    if not row or row[0] is None:
        return 0
    return int(row[0])


def fetch_rows(
        conn: psycopg.Connection,
        sql: str,
        params: tuple[Any, ...] = (),
) -> list[tuple[Any, ...]]:
    """Execute a parameterized query and return every row."""

    with conn.cursor() as cur:
        cur.execute(cast(LiteralString, sql), params)
        return list(cur.fetchall())
