"""Entity resolver contracts and an in-memory implementation.

A resolver translates a partial name typed by the user into candidate domain entities. The order of
the returned sequence is resolver-defined and is treated as a priority order by the dispatcher.
Returning nothing is a normal outcome, not an error; resolver failures propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from src.search.schema import AccountKind, AccountRef, EntityRef

DEFAULT_SEARCH_LIMIT = 25

SOURCE_ACCOUNT_KINDS: frozenset[AccountKind] = frozenset(
    {
        AccountKind.asset,
        AccountKind.mortgage,
        AccountKind.loan,
        AccountKind.debt,
        AccountKind.revenue,
    }
)
DESTINATION_ACCOUNT_KINDS: frozenset[AccountKind] = frozenset(
    {
        AccountKind.asset,
        AccountKind.mortgage,
        AccountKind.loan,
        AccountKind.debt,
        AccountKind.expense,
    }
)


class AccountResolver(Protocol):
    def search_accounts(
            self, term: str, kinds: Iterable[AccountKind], limit: int
    ) -> Sequence[AccountRef]: ...


class CategoryResolver(Protocol):
    def search_categories(self, term: str, limit: int) -> Sequence[EntityRef]: ...


class BudgetResolver(Protocol):
    def search_budgets(self, term: str, limit: int) -> Sequence[EntityRef]: ...


class BillResolver(Protocol):
    def search_bills(self, term: str, limit: int) -> Sequence[EntityRef]: ...


class TagResolver(Protocol):
    def search_tags(self, term: str, limit: int | None = None) -> Sequence[EntityRef]: ...


@dataclass(frozen=True)
class EntityResolvers:
    """The lookup services a dispatcher needs, one per entity kind."""

    accounts: AccountResolver
    categories: CategoryResolver
    budgets: BudgetResolver
    bills: BillResolver
    tags: TagResolver

    @classmethod
    def from_single(cls, resolver: object) -> EntityResolvers:
        """Use one object implementing every resolver protocol for all entity kinds."""

        return cls(
            accounts=resolver,  # type: ignore[arg-type]
            categories=resolver,  # type: ignore[arg-type]
            budgets=resolver,  # type: ignore[arg-type]
            bills=resolver,  # type: ignore[arg-type]
            tags=resolver,  # type: ignore[arg-type]
        )


def _matches(name: str, term: str) -> bool:
    return term.casefold() in name.casefold()


def _search(entities: Iterable[EntityRef], term: str, limit: int | None) -> list[EntityRef]:
    found = sorted((e for e in entities if _matches(e.name, term)), key=lambda e: (e.name, e.id))
    return found if limit is None else found[:limit]


class InMemoryResolvers:
    """Case-insensitive substring search over fixed entity lists.

    Results are ordered by name (then id), mirroring the Postgres resolvers.
    """

    def __init__(
            self,
            *,
            accounts: Iterable[AccountRef] = (),
            categories: Iterable[EntityRef] = (),
            budgets: Iterable[EntityRef] = (),
            bills: Iterable[EntityRef] = (),
            tags: Iterable[EntityRef] = (),
    ) -> None:
        self._accounts = list(accounts)
        self._categories = list(categories)
        self._budgets = list(budgets)
        self._bills = list(bills)
        self._tags = list(tags)

    def search_accounts(
            self, term: str, kinds: Iterable[AccountKind], limit: int
    ) -> list[AccountRef]:
        allowed = set(kinds)
        candidates = [a for a in self._accounts if a.kind in allowed]
        return _search(candidates, term, limit)  # type: ignore[return-value]

    def search_categories(self, term: str, limit: int) -> list[EntityRef]:
        return _search(self._categories, term, limit)

    def search_budgets(self, term: str, limit: int) -> list[EntityRef]:
        return _search(self._budgets, term, limit)

    def search_bills(self, term: str, limit: int) -> list[EntityRef]:
        return _search(self._bills, term, limit)

    def search_tags(self, term: str, limit: int | None = None) -> list[EntityRef]:
        return _search(self._tags, term, limit)
