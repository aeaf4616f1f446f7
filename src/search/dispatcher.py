"""Node dispatcher: one left-to-right pass over the parsed query nodes.

Later modifiers overwrite earlier ones (last write wins), so nodes are handled strictly in order and
each resolver call completes before the next node is looked at.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from src.search.accumulator import FilterAccumulator
from src.search.errors import UnknownOperator, UnsupportedNodeKind
from src.search.nodes import Field, Phrase, QueryNode, Word
from src.search.operators import (
    HandlerContext,
    HandlingClass,
    OperatorRegistry,
    default_registry,
)
from src.search.resolvers import EntityResolvers
from src.search.schema import Modifier, Operator, TransactionFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """Output of one dispatch pass."""

    filters: TransactionFilter
    words: list[str] = field(default_factory=list)
    modifiers: list[Modifier] = field(default_factory=list)


class NodeDispatcher:
    """Routes query nodes into a fresh `FilterAccumulator` per call.

    The operator whitelist is whatever `registry` contains; pass a restricted registry to disable
    operators. The dispatcher holds no per-request state and can be reused.
    """

    def __init__(
            self,
            resolvers: EntityResolvers,
            *,
            registry: OperatorRegistry | None = None,
    ) -> None:
        self._resolvers = resolvers
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> OperatorRegistry:
        return self._registry

    def process(self, nodes: Iterable[QueryNode]) -> DispatchResult:
        """Apply every node in order.

        Raises:
            UnsupportedNodeKind: For a node that is not a Word, Phrase or Field.
            UnknownOperator: For a Field whose operator is not registered.
            InvalidOperatorValue: For an unparseable amount or date value.
        """

        accumulator = FilterAccumulator()
        ctx = HandlerContext(accumulator=accumulator, resolvers=self._resolvers)
        words: list[str] = []
        modifiers: list[Modifier] = []

        for node in nodes:
            match node:
                case Word(text=text) | Phrase(text=text):
                    logger.debug("handle %s node", type(node).__name__)
                    words.append(text)
                    accumulator.add_word(text)
                case Field(operator=operator, value=value):
                    logger.debug("handle Field node %s:%s", operator, value)
                    self._apply_field(ctx, operator, value)
                    modifiers.append(Modifier(type=Operator(operator), value=value))
                case _:
                    kind = type(node).__name__
                    logger.error("cannot handle node %s", kind)
                    raise UnsupportedNodeKind(kind)

        return DispatchResult(filters=accumulator.snapshot(), words=words, modifiers=modifiers)

    def _apply_field(self, ctx: HandlerContext, operator: str, value: str) -> None:
        spec = self._registry.get(operator)
        if spec is None:
            logger.error("no such operator: %s", operator)
            raise UnknownOperator(operator)

        if spec.handling == HandlingClass.ignored or spec.handler is None:
            logger.info('ignore search operator "%s"', operator)
            return

        spec.handler(ctx, operator, value)
