"""Mutable filter collector filled by the node dispatcher.

The accumulator does no validation beyond type normalization; operator handlers validate values
before calling a setter. Every setter overwrites (last write wins), including the entity sets.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import TypeVar

from src.search.schema import AccountRef, DateRange, EntityRef, TransactionFilter

_E = TypeVar("_E", bound=EntityRef)


def _unique_by_id(entities: Iterable[_E]) -> tuple[_E, ...]:
    seen: set[int] = set()
    uniq: list[_E] = []
    for entity in entities:
        if entity.id in seen:
            continue
        seen.add(entity.id)
        uniq.append(entity)
    return tuple(uniq)


class FilterAccumulator:
    """Collects the constraints of one search request."""

    def __init__(self) -> None:
        self._words: list[str] = []
        self._source_accounts: tuple[AccountRef, ...] = ()
        self._destination_accounts: tuple[AccountRef, ...] = ()
        self._categories: tuple[EntityRef, ...] = ()
        self._budgets: tuple[EntityRef, ...] = ()
        self._tags: tuple[EntityRef, ...] = ()
        self._bills: tuple[EntityRef, ...] = ()
        self._amount_equals: Decimal | None = None
        self._amount_min: Decimal | None = None
        self._amount_max: Decimal | None = None
        self._date_range: DateRange | None = None
        self._date_before: date | None = None
        self._date_after: date | None = None
        self._created_on: date | None = None
        self._updated_on: date | None = None
        self._types: tuple[str, ...] = ()
        self._external_id: str | None = None
        self._internal_reference: str | None = None

    def add_word(self, text: str) -> None:
        self._words.append(text)

    def set_source_accounts(self, accounts: Iterable[AccountRef]) -> None:
        self._source_accounts = _unique_by_id(accounts)

    def set_destination_accounts(self, accounts: Iterable[AccountRef]) -> None:
        self._destination_accounts = _unique_by_id(accounts)

    def set_categories(self, categories: Iterable[EntityRef]) -> None:
        self._categories = _unique_by_id(categories)

    def set_budgets(self, budgets: Iterable[EntityRef]) -> None:
        self._budgets = _unique_by_id(budgets)

    def set_tags(self, tags: Iterable[EntityRef]) -> None:
        self._tags = _unique_by_id(tags)

    def set_bills(self, bills: Iterable[EntityRef]) -> None:
        self._bills = _unique_by_id(bills)

    def set_amount_equals(self, amount: Decimal) -> None:
        self._amount_equals = amount

    def set_amount_min(self, amount: Decimal) -> None:
        self._amount_min = amount

    def set_amount_max(self, amount: Decimal) -> None:
        self._amount_max = amount

    def set_types(self, types: Iterable[str]) -> None:
        self._types = tuple(types)

    def set_date_range(self, start: date, end: date) -> None:
        self._date_range = DateRange(start_date=start, end_date=end)

    def set_date_before(self, value: date) -> None:
        self._date_before = value

    def set_date_after(self, value: date) -> None:
        self._date_after = value

    def set_created_on(self, value: date) -> None:
        self._created_on = value

    def set_updated_on(self, value: date) -> None:
        self._updated_on = value

    def set_external_id(self, value: str) -> None:
        self._external_id = value

    def set_internal_reference(self, value: str) -> None:
        self._internal_reference = value

    def snapshot(self) -> TransactionFilter:
        """Return the collected constraints as a frozen `TransactionFilter`."""

        return TransactionFilter(
            free_text_words=tuple(self._words),
            source_accounts=self._source_accounts,
            destination_accounts=self._destination_accounts,
            categories=self._categories,
            budgets=self._budgets,
            tags=self._tags,
            bills=self._bills,
            amount_equals=self._amount_equals,
            amount_min=self._amount_min,
            amount_max=self._amount_max,
            date_range=self._date_range,
            date_before=self._date_before,
            date_after=self._date_after,
            created_on=self._created_on,
            updated_on=self._updated_on,
            types=self._types,
            external_id=self._external_id,
            internal_reference=self._internal_reference,
        )
