"""Tests for the query tokenizer (raw text -> Word/Phrase/Field nodes)."""

from __future__ import annotations

import pytest

from src.search.errors import QuerySyntaxError
from src.search.nodes import Field, Phrase, Word
from src.search.tokenizer import parse_query


def test_words_phrases_and_fields_keep_order() -> None:
    nodes = parse_query('dinner "at the pub" amount_min:10 category:Groceries Friday')

    assert nodes == [
        Word("dinner"),
        Phrase("at the pub"),
        Field("amount_min", "10"),
        Field("category", "Groceries"),
        Word("Friday"),
    ]


def test_quoted_field_value() -> None:
    assert parse_query('category:"eating out" tag:x') == [
        Field("category", "eating out"),
        Field("tag", "x"),
    ]


def test_field_name_is_lowercased_value_is_not() -> None:
    assert parse_query("FROM:Checking") == [Field("from", "Checking")]


def test_words_are_case_sensitive_literals() -> None:
    assert parse_query("  Rent   rent ") == [Word("Rent"), Word("rent")]


def test_empty_field_value_is_a_word() -> None:
    assert parse_query('from: to:""') == [Word("from:"), Word('to:""')]


def test_non_identifier_prefix_is_a_word() -> None:
    assert parse_query("12:30 -5:x") == [Word("12:30"), Word("-5:x")]


def test_escaped_quote_inside_phrase() -> None:
    assert parse_query(r'"say \"hi\""') == [Phrase('say "hi"')]


def test_empty_quotes_are_dropped() -> None:
    assert parse_query('"" "   " word') == [Word("word")]


def test_empty_query() -> None:
    assert parse_query("") == []
    assert parse_query("   ") == []


@pytest.mark.parametrize("text", ['"unterminated', 'category:"eating out', 'a "b'])
def test_unterminated_quote_is_a_syntax_error(text: str) -> None:
    with pytest.raises(QuerySyntaxError):
        parse_query(text)
