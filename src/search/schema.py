"""Search filter schema (Pydantic models).

This schema is the contract between the node dispatcher and the deterministic SQL builder. The
dispatcher fills a mutable accumulator; what leaves it is always a frozen `TransactionFilter`.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Operator(StrEnum):
    """Supported `field:value` operator names (the user-facing modifier surface)."""

    from_ = "from"
    source = "source"
    from_account_contains = "from_account_contains"
    from_account_starts = "from_account_starts"
    from_account_ends = "from_account_ends"
    to = "to"
    destination = "destination"
    category = "category"
    bill = "bill"
    tag = "tag"
    budget = "budget"
    amount = "amount"
    amount_is = "amount_is"
    amount_max = "amount_max"
    amount_less = "amount_less"
    amount_min = "amount_min"
    amount_more = "amount_more"
    type = "type"
    date = "date"
    on = "on"
    date_before = "date_before"
    before = "before"
    date_after = "date_after"
    after = "after"
    created_on = "created_on"
    updated_on = "updated_on"
    external_id = "external_id"
    internal_reference = "internal_reference"
    user_action = "user_action"


class AccountKind(StrEnum):
    """Account types known to the transaction store."""

    asset = "asset"
    mortgage = "mortgage"
    loan = "loan"
    debt = "debt"
    revenue = "revenue"
    expense = "expense"
    cash = "cash"
    initial_balance = "initial_balance"
    reconciliation = "reconciliation"


class EntityRef(BaseModel):
    """A resolved category, budget, tag or bill."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int
    name: str


class AccountRef(EntityRef):
    """A resolved account."""

    kind: AccountKind


class DateRange(BaseModel):
    """An inclusive calendar-day range."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    start_date: date
    end_date: date

    @model_validator(mode="after")
    def validate_range(self) -> DateRange:
        """Validate that the inclusive range is well-formed (`start_date <= end_date`)."""

        if self.start_date > self.end_date:
            raise ValueError("start_date must be <= end_date")
        return self


class Modifier(BaseModel):
    """One successfully applied `field:value` modifier, echoed back to the caller."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Operator
    value: str


class TransactionFilter(BaseModel):
    """A read-only snapshot of every constraint collected during one parse pass.

    Constraints are combined with logical AND by the executor. Entity tuples hold resolver output
    in resolver order; monetary bounds are always non-negative magnitudes.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    free_text_words: tuple[str, ...] = ()

    source_accounts: tuple[AccountRef, ...] = ()
    destination_accounts: tuple[AccountRef, ...] = ()
    categories: tuple[EntityRef, ...] = ()
    budgets: tuple[EntityRef, ...] = ()
    tags: tuple[EntityRef, ...] = ()
    bills: tuple[EntityRef, ...] = ()

    amount_equals: Decimal | None = Field(default=None, ge=0)
    amount_min: Decimal | None = Field(default=None, ge=0)
    amount_max: Decimal | None = Field(default=None, ge=0)

    date_range: DateRange | None = None
    date_before: date | None = None
    date_after: date | None = None
    created_on: date | None = None
    updated_on: date | None = None

    types: tuple[str, ...] = ()
    external_id: str | None = None
    internal_reference: str | None = None

    def is_empty(self) -> bool:
        """Whether no constraint at all has been collected."""

        return self == TransactionFilter()
