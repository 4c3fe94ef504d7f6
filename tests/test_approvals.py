"""Tests for the approval ledger."""

from pathlib import Path

import pytest

from screenshot_review.approvals import load_approvals, merge_approvals, save_approvals
from screenshot_review.errors import ReviewInputError


def test_missing_ledger_is_empty(tmp_path: Path) -> None:
    assert load_approvals(tmp_path / "approved.json") == set()


def test_malformed_ledger_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "approved.json"
    path.write_text("[oops", encoding="utf-8")
    with pytest.raises(ReviewInputError, match="read approvals"):
        load_approvals(path)

    path.write_text('{"en|iPhone_Air|home": true}', encoding="utf-8")
    with pytest.raises(ReviewInputError, match="JSON array"):
        load_approvals(path)


def test_round_trip_is_byte_identical(tmp_path: Path) -> None:
    path = tmp_path / "approved.json"
    save_approvals(path, {"fr|iPhone_Air|home", "en|iPhone_Air|home", "en|iPad_Pro_13_M4|home"})
    first = path.read_bytes()
    save_approvals(path, load_approvals(path))
    assert path.read_bytes() == first
    assert first.decode("utf-8").index("en|iPad") < first.decode("utf-8").index("fr|")


def test_merge_counts_matched_and_added() -> None:
    merge = merge_approvals({"en|iPhone_Air|home"}, {"en|iPhone_Air|home", "en|iPhone_Air|details"})
    assert merge.matched == 2
    assert merge.added == ("en|iPhone_Air|details",)
    assert merge.ledger == {"en|iPhone_Air|home", "en|iPhone_Air|details"}


def test_merge_is_commutative() -> None:
    first = {"en|iPhone_Air|home", "en|iPhone_Air|details"}
    second = {"fr|iPhone_Air|home", "en|iPhone_Air|home"}
    forward = merge_approvals(merge_approvals(set(), first).ledger, second).ledger
    backward = merge_approvals(merge_approvals(set(), second).ledger, first).ledger
    assert forward == backward


def test_merge_never_shrinks() -> None:
    merge = merge_approvals({"en|iPhone_Air|home"}, set())
    assert merge.ledger == {"en|iPhone_Air|home"}
    assert merge.matched == 0
    assert merge.added == ()


def test_empty_ledger_file_is_fatal(tmp_path: Path) -> None:
    path = tmp_path / "approved.json"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ReviewInputError, match="read approvals"):
        load_approvals(path)
