"""Postgres-backed entity resolvers.

Lookups are case-insensitive substring matches (`ILIKE`) with LIKE wildcards in the user term
escaped, ordered by name so results are deterministic. Each call is one short read query on the
connection it was given; connection errors propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import psycopg

from src.db.query import fetch_rows
from src.search.schema import AccountKind, AccountRef, EntityRef
from src.sql.builder import escape_like

logger = logging.getLogger(__name__)

# Allowlisted lookup tables: entity kind -> table name.
_ENTITY_TABLES: dict[str, str] = {
    "category": "categories",
    "budget": "budgets",
    "bill": "bills",
    "tag": "tags",
}


def _pattern(term: str) -> str:
    return f"%{escape_like(term)}%"


class PostgresResolvers:
    """Implements every resolver protocol on top of one psycopg connection."""

    def __init__(self, conn: psycopg.Connection) -> None:
        self._conn = conn

    def _search_entities(self, kind: str, term: str, limit: int | None) -> list[EntityRef]:
        table = _ENTITY_TABLES[kind]
        sql = f"SELECT id, name FROM {table} WHERE name ILIKE %s ORDER BY name, id"
        params: tuple[Any, ...] = (_pattern(term),)
        if limit is not None:
            sql += " LIMIT %s"
            params += (limit,)

        rows = fetch_rows(self._conn, sql, params)
        logger.debug("search %s term=%r found=%d", kind, term, len(rows))
        return [EntityRef(id=row[0], name=row[1]) for row in rows]

    def search_accounts(
            self, term: str, kinds: Iterable[AccountKind], limit: int
    ) -> list[AccountRef]:
        kind_values = sorted(str(k) for k in kinds)
        rows = fetch_rows(
            self._conn,
            "SELECT id, name, account_type FROM accounts "
            "WHERE name ILIKE %s AND account_type = ANY(%s) "
            "ORDER BY name, id LIMIT %s",
            (_pattern(term), kind_values, limit),
        )
        logger.debug("search accounts term=%r kinds=%s found=%d", term, kind_values, len(rows))
        return [AccountRef(id=row[0], name=row[1], kind=AccountKind(row[2])) for row in rows]

    def search_categories(self, term: str, limit: int) -> list[EntityRef]:
        return self._search_entities("category", term, limit)

    def search_budgets(self, term: str, limit: int) -> list[EntityRef]:
        return self._search_entities("budget", term, limit)

    def search_bills(self, term: str, limit: int) -> list[EntityRef]:
        return self._search_entities("bill", term, limit)

    def search_tags(self, term: str, limit: int | None = None) -> list[EntityRef]:
        return self._search_entities("tag", term, limit)
