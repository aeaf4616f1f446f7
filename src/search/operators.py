"""Operator registry: the whitelist of `field:value` modifiers and their handlers.

Each operator belongs to exactly one handling class. Handlers validate and resolve the raw value
first and only then mutate the accumulator, so a failing modifier never leaves partial state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import StrEnum
from functools import cache

from src.search.accumulator import FilterAccumulator
from src.search.errors import InvalidOperatorValue
from src.search.resolvers import (
    DEFAULT_SEARCH_LIMIT,
    DESTINATION_ACCOUNT_KINDS,
    SOURCE_ACCOUNT_KINDS,
    EntityResolvers,
)
from src.search.schema import AccountRef, Operator
from src.search.values import parse_amount, parse_date

logger = logging.getLogger(__name__)


class HandlingClass(StrEnum):
    """How an operator affects the accumulator."""

    entity = "entity"
    numeric = "numeric"
    date = "date"
    literal = "literal"
    ignored = "ignored"


@dataclass(frozen=True)
class HandlerContext:
    """What a handler may touch: the request's accumulator and the resolvers."""

    accumulator: FilterAccumulator
    resolvers: EntityResolvers


Handler = Callable[[HandlerContext, str, str], None]


@dataclass(frozen=True)
class OperatorSpec:
    """A registered operator: its name, handling class and handler."""

    operator: Operator
    handling: HandlingClass
    handler: Handler | None = None

    @property
    def name(self) -> str:
        return self.operator.value


def _require_amount(operator: str, value: str) -> Decimal:
    amount = parse_amount(value)
    if amount is None:
        raise InvalidOperatorValue(operator, value)
    return amount


def _require_date(operator: str, value: str) -> date:
    parsed = parse_date(value)
    if parsed is None:
        raise InvalidOperatorValue(operator, value)
    return parsed


def _search_source_accounts(ctx: HandlerContext, value: str) -> list[AccountRef]:
    return list(
        ctx.resolvers.accounts.search_accounts(value, SOURCE_ACCOUNT_KINDS, DEFAULT_SEARCH_LIMIT)
    )


def _source_accounts(ctx: HandlerContext, operator: str, value: str) -> None:
    accounts = _search_source_accounts(ctx, value)
    logger.debug("operator=%s found %d source account(s)", operator, len(accounts))
    if accounts:
        ctx.accumulator.set_source_accounts(accounts)


def _filtered_source_accounts(
        ctx: HandlerContext,
        operator: str,
        value: str,
        keep: Callable[[str], bool],
) -> None:
    accounts = _search_source_accounts(ctx, value)
    if not accounts:
        logger.debug("operator=%s found zero source accounts", operator)
        return
    filtered = [a for a in accounts if keep(a.name)]
    logger.debug("operator=%s found %d, left with %d", operator, len(accounts), len(filtered))
    if filtered:
        ctx.accumulator.set_source_accounts(filtered)


def _source_accounts_starting(ctx: HandlerContext, operator: str, value: str) -> None:
    _filtered_source_accounts(ctx, operator, value, lambda name: name.startswith(value))


def _source_accounts_ending(ctx: HandlerContext, operator: str, value: str) -> None:
    _filtered_source_accounts(ctx, operator, value, lambda name: name.endswith(value))


def _destination_accounts(ctx: HandlerContext, operator: str, value: str) -> None:
    accounts = ctx.resolvers.accounts.search_accounts(
        value, DESTINATION_ACCOUNT_KINDS, DEFAULT_SEARCH_LIMIT
    )
    logger.debug("operator=%s found %d destination account(s)", operator, len(accounts))
    if accounts:
        ctx.accumulator.set_destination_accounts(accounts)


def _categories(ctx: HandlerContext, operator: str, value: str) -> None:
    found = ctx.resolvers.categories.search_categories(value, DEFAULT_SEARCH_LIMIT)
    if found:
        ctx.accumulator.set_categories(found)


def _bills(ctx: HandlerContext, operator: str, value: str) -> None:
    found = ctx.resolvers.bills.search_bills(value, DEFAULT_SEARCH_LIMIT)
    if found:
        ctx.accumulator.set_bills(found)


def _tags(ctx: HandlerContext, operator: str, value: str) -> None:
    found = ctx.resolvers.tags.search_tags(value)
    if found:
        ctx.accumulator.set_tags(found)


def _budgets(ctx: HandlerContext, operator: str, value: str) -> None:
    found = ctx.resolvers.budgets.search_budgets(value, DEFAULT_SEARCH_LIMIT)
    if found:
        ctx.accumulator.set_budgets(found)


def _amount_equals(ctx: HandlerContext, operator: str, value: str) -> None:
    amount = _require_amount(operator, value)
    logger.debug('set "%s" with value "%s"', operator, amount)
    ctx.accumulator.set_amount_equals(amount)


def _amount_max(ctx: HandlerContext, operator: str, value: str) -> None:
    amount = _require_amount(operator, value)
    logger.debug('set "%s" with value "%s"', operator, amount)
    ctx.accumulator.set_amount_max(amount)


def _amount_min(ctx: HandlerContext, operator: str, value: str) -> None:
    amount = _require_amount(operator, value)
    logger.debug('set "%s" with value "%s"', operator, amount)
    ctx.accumulator.set_amount_min(amount)


def _transaction_type(ctx: HandlerContext, operator: str, value: str) -> None:
    ctx.accumulator.set_types([value[:1].upper() + value[1:]])


def _date_on(ctx: HandlerContext, operator: str, value: str) -> None:
    day = _require_date(operator, value)
    ctx.accumulator.set_date_range(day, day)


def _date_before(ctx: HandlerContext, operator: str, value: str) -> None:
    ctx.accumulator.set_date_before(_require_date(operator, value))


def _date_after(ctx: HandlerContext, operator: str, value: str) -> None:
    ctx.accumulator.set_date_after(_require_date(operator, value))


def _created_on(ctx: HandlerContext, operator: str, value: str) -> None:
    ctx.accumulator.set_created_on(_require_date(operator, value))


def _updated_on(ctx: HandlerContext, operator: str, value: str) -> None:
    ctx.accumulator.set_updated_on(_require_date(operator, value))


def _external_id(ctx: HandlerContext, operator: str, value: str) -> None:
    ctx.accumulator.set_external_id(value)


def _internal_reference(ctx: HandlerContext, operator: str, value: str) -> None:
    ctx.accumulator.set_internal_reference(value)


_HANDLERS: tuple[tuple[tuple[Operator, ...], HandlingClass, Handler | None], ...] = (
    (
        (Operator.from_, Operator.source, Operator.from_account_contains),
        HandlingClass.entity,
        _source_accounts,
    ),
    ((Operator.from_account_starts,), HandlingClass.entity, _source_accounts_starting),
    ((Operator.from_account_ends,), HandlingClass.entity, _source_accounts_ending),
    ((Operator.to, Operator.destination), HandlingClass.entity, _destination_accounts),
    ((Operator.category,), HandlingClass.entity, _categories),
    ((Operator.bill,), HandlingClass.entity, _bills),
    ((Operator.tag,), HandlingClass.entity, _tags),
    ((Operator.budget,), HandlingClass.entity, _budgets),
    ((Operator.amount, Operator.amount_is), HandlingClass.numeric, _amount_equals),
    ((Operator.amount_max, Operator.amount_less), HandlingClass.numeric, _amount_max),
    ((Operator.amount_min, Operator.amount_more), HandlingClass.numeric, _amount_min),
    ((Operator.type,), HandlingClass.literal, _transaction_type),
    ((Operator.date, Operator.on), HandlingClass.date, _date_on),
    ((Operator.date_before, Operator.before), HandlingClass.date, _date_before),
    ((Operator.date_after, Operator.after), HandlingClass.date, _date_after),
    ((Operator.created_on,), HandlingClass.date, _created_on),
    ((Operator.updated_on,), HandlingClass.date, _updated_on),
    ((Operator.external_id,), HandlingClass.literal, _external_id),
    ((Operator.internal_reference,), HandlingClass.literal, _internal_reference),
    ((Operator.user_action,), HandlingClass.ignored, None),
)


class OperatorRegistry:
    """An immutable mapping from operator name to `OperatorSpec`."""

    def __init__(self, specs: Iterable[OperatorSpec]) -> None:
        self._specs: dict[str, OperatorSpec] = {s.name: s for s in specs}

    def get(self, name: str) -> OperatorSpec | None:
        return self._specs.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[OperatorSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)

    def names(self) -> list[str]:
        return list(self._specs)

    def restrict(self, names: Iterable[str]) -> OperatorRegistry:
        """Return a registry limited to `names`.

        Raises:
            ValueError: If a name is not registered here.
        """

        wanted = list(dict.fromkeys(names))
        unknown = [n for n in wanted if n not in self._specs]
        if unknown:
            raise ValueError(f"unknown search operator(s): {', '.join(unknown)}")
        return OperatorRegistry(self._specs[n] for n in wanted)


@cache
def default_registry() -> OperatorRegistry:
    """Return the registry of every supported operator (built once per process)."""

    return OperatorRegistry(
        OperatorSpec(operator=op, handling=handling, handler=handler)
        for operators, handling, handler in _HANDLERS
        for op in operators
    )
