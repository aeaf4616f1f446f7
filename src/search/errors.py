"""Search error hierarchy.

Every error raised while interpreting a query is a `SearchError`, so callers can treat any of them
as a bad request. There is no partial-result mode: the first error aborts the whole parse.
"""

from __future__ import annotations


class SearchError(ValueError):
    """Base class for user-facing query errors."""


class QuerySyntaxError(SearchError):
    """Raised when the raw query text cannot be tokenized (e.g. an unterminated quote)."""


class UnsupportedNodeKind(SearchError):
    """Raised when the dispatcher meets a node variant it does not handle."""

    def __init__(self, kind: str) -> None:
        super().__init__(f'search cannot handle "{kind}" nodes')
        self.kind = kind


class UnknownOperator(SearchError):
    """Raised for a `field:value` modifier whose field name is not a known operator."""

    def __init__(self, operator: str) -> None:
        super().__init__(f'unsupported search operator: "{operator}"')
        self.operator = operator


class InvalidOperatorValue(SearchError):
    """Raised when a numeric or date operator value cannot be parsed."""

    def __init__(self, operator: str, value: str) -> None:
        super().__init__(f'invalid value for search operator "{operator}": "{value}"')
        self.operator = operator
        self.value = value
