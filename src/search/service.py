"""Search orchestration: tokenize the raw query, then dispatch the nodes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import monotonic

from src.search.dispatcher import NodeDispatcher
from src.search.operators import OperatorRegistry
from src.search.resolvers import EntityResolvers
from src.search.schema import Modifier, TransactionFilter
from src.search.tokenizer import parse_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    """A fully interpreted query, ready for the SQL builder."""

    query: str
    filters: TransactionFilter
    words: list[str]
    modifiers: list[Modifier]
    search_time: float

    @property
    def words_as_string(self) -> str:
        """The residual free-text query (words and phrases joined by single spaces)."""

        return " ".join(self.words)

    @property
    def has_modifiers(self) -> bool:
        return bool(self.modifiers)


class TransactionSearch:
    """Interprets raw query strings with a fixed dispatcher.

    Instances hold no per-request state, so one can serve any number of requests.
    """

    def __init__(self, dispatcher: NodeDispatcher) -> None:
        self._dispatcher = dispatcher

    def parse(self, text: str) -> SearchResult:
        """Interpret `text` into a `SearchResult`.

        Raises:
            SearchError: On a syntax error, unknown operator or invalid operator value.
        """

        started = monotonic()
        nodes = parse_query(text)
        logger.debug("found %d node(s)", len(nodes))

        dispatched = self._dispatcher.process(nodes)
        elapsed = monotonic() - started

        logger.info(
            "parsed nodes=%d words=%d modifiers=%d latency_ms=%d",
            len(nodes),
            len(dispatched.words),
            len(dispatched.modifiers),
            int(elapsed * 1000),
        )
        return SearchResult(
            query=text,
            filters=dispatched.filters,
            words=dispatched.words,
            modifiers=dispatched.modifiers,
            search_time=elapsed,
        )


def search_query(
        text: str,
        *,
        resolvers: EntityResolvers,
        registry: OperatorRegistry | None = None,
) -> SearchResult:
    """Interpret `text` with a one-off dispatcher (convenience wrapper)."""

    return TransactionSearch(NodeDispatcher(resolvers, registry=registry)).parse(text)
