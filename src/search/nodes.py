"""Typed query nodes produced by the tokenizer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Word:
    """A bare token, kept as a case-sensitive literal."""

    text: str


@dataclass(frozen=True)
class Phrase:
    """A multi-word literal taken from quoted input."""

    text: str


@dataclass(frozen=True)
class Field:
    """A `operator:value` modifier."""

    operator: str
    value: str


QueryNode = Word | Phrase | Field
