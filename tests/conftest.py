"""Pytest configuration and shared fixtures.

The repository uses a flat `src/` layout. This conftest ensures tests can import from the `src.*`
namespace when running `pytest` without installing the package.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.search.resolvers import EntityResolvers, InMemoryResolvers  # noqa: E402
from src.search.schema import AccountKind, AccountRef, EntityRef  # noqa: E402


class RecordingResolvers(InMemoryResolvers):
    """In-memory resolvers that also record every lookup made through them."""

    def __init__(self, **kwargs: Iterable[EntityRef]) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self.calls: list[tuple[str, str, int | None]] = []

    def search_accounts(self, term, kinds, limit):  # type: ignore[no-untyped-def]
        self.calls.append(("accounts", term, limit))
        return super().search_accounts(term, kinds, limit)

    def search_categories(self, term, limit):  # type: ignore[no-untyped-def]
        self.calls.append(("categories", term, limit))
        return super().search_categories(term, limit)

    def search_budgets(self, term, limit):  # type: ignore[no-untyped-def]
        self.calls.append(("budgets", term, limit))
        return super().search_budgets(term, limit)

    def search_bills(self, term, limit):  # type: ignore[no-untyped-def]
        self.calls.append(("bills", term, limit))
        return super().search_bills(term, limit)

    def search_tags(self, term, limit=None):  # type: ignore[no-untyped-def]
        self.calls.append(("tags", term, limit))
        return super().search_tags(term, limit)


ACCOUNTS = [
    AccountRef(id=1, name="Checking", kind=AccountKind.asset),
    AccountRef(id=2, name="Savings Checking", kind=AccountKind.asset),
    AccountRef(id=3, name="Employer Inc", kind=AccountKind.revenue),
    AccountRef(id=4, name="Supermarket", kind=AccountKind.expense),
    AccountRef(id=5, name="Car Loan", kind=AccountKind.loan),
    AccountRef(id=6, name="Cash wallet", kind=AccountKind.cash),
]
CATEGORIES = [
    EntityRef(id=10, name="Groceries"),
    EntityRef(id=11, name="Eating out"),
]
BUDGETS = [EntityRef(id=20, name="Monthly food")]
BILLS = [EntityRef(id=30, name="Rent")]
TAGS = [EntityRef(id=40, name="holiday"), EntityRef(id=41, name="holiday-2024")]


@pytest.fixture
def recording() -> RecordingResolvers:
    return RecordingResolvers(
        accounts=ACCOUNTS,
        categories=CATEGORIES,
        budgets=BUDGETS,
        bills=BILLS,
        tags=TAGS,
    )


@pytest.fixture
def resolvers(recording: RecordingResolvers) -> EntityResolvers:
    return EntityResolvers.from_single(recording)
