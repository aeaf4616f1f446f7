"""Query tokenizer: raw search text -> ordered `QueryNode` list.

Grammar, kept deliberately small:
    - whitespace separates tokens;
    - `"..."` is a phrase (`\\"` escapes a quote, empty quotes are dropped);
    - `name:value` is a field when `name` looks like an identifier; the name is lowercased and the
      value may itself be quoted (`category:"eating out"`);
    - anything else, including `name:` with nothing after it, is a bare word.

The tokenizer does not know which operators exist; validating field names is the dispatcher's job.
"""

from __future__ import annotations

import re

from src.search.errors import QuerySyntaxError
from src.search.nodes import Field, Phrase, QueryNode, Word

_FIELD_PREFIX_RE = re.compile(r"(?P<name>[A-Za-z_][A-Za-z0-9_]*):")


def _read_quoted(text: str, start: int) -> tuple[str, int]:
    """Read a quoted string starting at the opening quote.

    Returns:
        `(content, position after the closing quote)`.
    """

    chars: list[str] = []
    pos = start + 1
    while pos < len(text):
        ch = text[pos]
        if ch == "\\" and pos + 1 < len(text) and text[pos + 1] == '"':
            chars.append('"')
            pos += 2
            continue
        if ch == '"':
            return "".join(chars), pos + 1
        chars.append(ch)
        pos += 1
    raise QuerySyntaxError(f"unterminated quote at position {start}")


def _bare_end(text: str, pos: int) -> int:
    while pos < len(text) and not text[pos].isspace():
        pos += 1
    return pos


def parse_query(text: str) -> list[QueryNode]:
    """Split raw query text into Word, Phrase and Field nodes, preserving order.

    Raises:
        QuerySyntaxError: On an unterminated quote.
    """

    nodes: list[QueryNode] = []
    value = text or ""
    pos = 0

    while pos < len(value):
        if value[pos].isspace():
            pos += 1
            continue

        if value[pos] == '"':
            phrase, pos = _read_quoted(value, pos)
            if phrase.strip():
                nodes.append(Phrase(text=phrase))
            continue

        start = pos
        match = _FIELD_PREFIX_RE.match(value, pos)
        if match:
            name = match.group("name").lower()
            pos = match.end()
            if pos < len(value) and value[pos] == '"':
                field_value, pos = _read_quoted(value, pos)
            else:
                end = _bare_end(value, pos)
                field_value, pos = value[pos:end], end
            if field_value:
                nodes.append(Field(operator=name, value=field_value))
            else:
                nodes.append(Word(text=value[start:pos]))
            continue

        pos = _bare_end(value, pos)
        nodes.append(Word(text=value[start:pos]))

    return nodes
