"""Shared Postgres connection helpers.

Transaction dates and created/updated timestamps are compared as UTC calendar days, so every DB
session must set its timezone to UTC.
"""

from __future__ import annotations

import os

import psycopg


def require_database_url() -> str:
    """Read `DATABASE_URL` from the environment or raise a clear error."""

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL is required (set it in .env or environment)")
    return database_url


def connect_utc(database_url: str, *, connect_timeout: int = 10) -> psycopg.Connection:
    """Connect to Postgres, lock the session timezone to UTC and make the session read-only."""

    conn = psycopg.connect(database_url, connect_timeout=connect_timeout)
    # Must be set before the first statement opens a transaction.
    conn.read_only = True
    conn.execute("SET TIME ZONE 'UTC'", prepare=False)
    return conn
