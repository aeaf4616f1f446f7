"""Allowlisted SQL identifiers.

All column names referenced in generated SQL must come from these mappings; no user-provided
identifier should ever be interpolated into SQL.
"""

from __future__ import annotations

TRANSACTIONS_TABLE = "transactions"
TRANSACTION_TAGS_TABLE = "transaction_tags"

SELECT_COLUMNS: tuple[str, ...] = (
    "id",
    "date",
    "description",
    "amount",
    "type",
    "source_account_id",
    "destination_account_id",
    "category_id",
    "budget_id",
    "bill_id",
    "external_id",
    "internal_reference",
    "created_at",
    "updated_at",
)

# TransactionFilter attribute -> foreign key column on `transactions`.
ENTITY_COLUMNS: dict[str, str] = {
    "source_accounts": "source_account_id",
    "destination_accounts": "destination_account_id",
    "categories": "category_id",
    "budgets": "budget_id",
    "bills": "bill_id",
}

TEXT_SEARCH_COLUMN = "description"
AMOUNT_COLUMN = "amount"
DATE_COLUMN = "date"
TYPE_COLUMN = "type"
EXTERNAL_ID_COLUMN = "external_id"
INTERNAL_REFERENCE_COLUMN = "internal_reference"
CREATED_AT_COLUMN = "created_at"
UPDATED_AT_COLUMN = "updated_at"
