"""Command-line entry point: interpret a search query against the configured database.

Usage:
    python -m src.cli 'groceries from:Checking amount_min:10 date_after:2024-01-01' --sql
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.db.connection import connect_utc, require_database_url
from src.db.query import fetch_rows, fetch_scalar_int
from src.db.resolvers import PostgresResolvers
from src.search.errors import SearchError
from src.search.resolvers import EntityResolvers
from src.search.service import SearchResult
from src.sql.builder import BuiltQuery, SQLBuilderError, build_count_query, build_search_query

logger = logging.getLogger(__name__)


def _render(result: SearchResult, query: BuiltQuery | None) -> str:
    payload: dict[str, object] = {
        "words": result.words_as_string,
        "modifiers": [m.model_dump(mode="json") for m in result.modifiers],
        "filters": result.filters.model_dump(mode="json", exclude_defaults=True),
        "unfiltered": result.filters.is_empty(),
        "search_time": round(result.search_time, 6),
    }
    if query is not None:
        payload["sql"] = query.sql
        payload["params"] = [str(p) for p in query.params]
    return json.dumps(payload, ensure_ascii=False, indent=2)


def main(argv: list[str] | None = None) -> int:
    """Parse a query, print the resulting filter as JSON and optionally run it."""

    parser = argparse.ArgumentParser(description="Interpret a transaction search query.")
    parser.add_argument("query", help="Raw search text, e.g. 'dinner amount_min:10'.")
    parser.add_argument("--page", type=int, default=1, help="Result page (1-based).")
    parser.add_argument("--sql", action="store_true", help="Also print the generated SQL.")
    parser.add_argument("--run", action="store_true", help="Execute the query and print rows.")
    args = parser.parse_args(argv)

    load_dotenv(".env")
    settings = load_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)

    database_url = settings.database_url or require_database_url()
    with connect_utc(database_url) as conn:
        search = app.search(EntityResolvers.from_single(PostgresResolvers(conn)))
        try:
            result = search.parse(args.query)
            built = build_search_query(
                result.filters, page=args.page, page_size=settings.search_page_size
            )
        except (SearchError, SQLBuilderError) as exc:
            logger.info("rejected query reason=%s", exc)
            print(f"error: {exc}", file=sys.stderr)
            return 2

        print(_render(result, built if args.sql else None))
        if args.run:
            total = build_count_query(result.filters)
            print(f"total: {fetch_scalar_int(conn, total.sql, total.params)}")
            for row in fetch_rows(conn, built.sql, built.params):
                print("\t".join("" if v is None else str(v) for v in row))
    return 0


if __name__ == "__main__":
    sys.exit(main())
