"""Tests for the command-line entry point (DB access replaced by in-memory fakes)."""

from __future__ import annotations

import json
from contextlib import nullcontext
from typing import Any

import pytest

from src import cli


@pytest.fixture(autouse=True)
def _fake_db(monkeypatch: pytest.MonkeyPatch, tmp_path, recording) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SEARCH_OPERATORS", raising=False)
    monkeypatch.setenv("DATABASE_URL", "postgresql://example/invalid")
    monkeypatch.setattr(cli, "connect_utc", lambda _url: nullcontext(object()))
    monkeypatch.setattr(cli, "PostgresResolvers", lambda _conn: recording)


def test_cli_prints_filter_json(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["rent from:Checking amount_max:900", "--sql"])

    assert code == 0
    payload: dict[str, Any] = json.loads(capsys.readouterr().out)
    assert payload["words"] == "rent"
    assert [m["type"] for m in payload["modifiers"]] == ["from", "amount_max"]
    assert payload["filters"]["amount_max"] == "900"
    assert payload["unfiltered"] is False
    assert "LIMIT %s OFFSET %s" in payload["sql"]
    assert payload["params"][-2:] == ["50", "0"]


def test_cli_reports_query_errors(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["bogus:1"])

    assert code == 2
    assert 'unsupported search operator: "bogus"' in capsys.readouterr().err


def test_cli_flags_queries_without_constraints(capsys: pytest.CaptureFixture[str]) -> None:
    # Ignored operators and unmatched lookups are logged but add no constraint.
    code = cli.main(["user_action:store category:NoSuchCategory"])

    assert code == 0
    payload: dict[str, Any] = json.loads(capsys.readouterr().out)
    assert payload["unfiltered"] is True
    assert payload["filters"] == {}
    assert [m["type"] for m in payload["modifiers"]] == ["user_action", "category"]
