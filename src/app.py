"""Application composition root.

This module wires together configuration and the operator whitelist for the search runtime.
Resolvers are per-connection, so a `TransactionSearch` is built on demand around them.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.config.settings import Settings
from src.search.dispatcher import NodeDispatcher
from src.search.operators import OperatorRegistry, default_registry
from src.search.resolvers import EntityResolvers
from src.search.service import TransactionSearch


@dataclass(frozen=True)
class App:
    """Shared application dependencies."""

    settings: Settings
    registry: OperatorRegistry

    def search(self, resolvers: EntityResolvers) -> TransactionSearch:
        """Build a search service using the configured operator whitelist."""

        return TransactionSearch(NodeDispatcher(resolvers, registry=self.registry))


def create_app(settings: Settings) -> App:
    """Create the application container."""

    registry = default_registry()
    if settings.search_operators is not None:
        registry = registry.restrict(settings.search_operators)
    return App(settings=settings, registry=registry)
