"""Tests for temp-file-then-rename writes."""

from pathlib import Path

import pytest

from screenshot_review.errors import ReviewWriteError
from screenshot_review.utils import atomic_write_text


def test_atomic_write_creates_parents_and_replaces(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out" / "manifest.json"
    atomic_write_text(target, "first\n")
    atomic_write_text(target, "second\n")
    assert target.read_text(encoding="utf-8") == "second\n"
    assert [path.name for path in target.parent.iterdir()] == ["manifest.json"]


def test_atomic_write_refuses_symlink(tmp_path: Path) -> None:
    real = tmp_path / "real.json"
    real.write_text("keep", encoding="utf-8")
    link = tmp_path / "link.json"
    link.symlink_to(real)
    with pytest.raises(ReviewWriteError, match="symlink"):
        atomic_write_text(link, "overwrite")
    assert real.read_text(encoding="utf-8") == "keep"


def test_atomic_write_refuses_directory(tmp_path: Path) -> None:
    target = tmp_path / "index.html"
    target.mkdir()
    with pytest.raises(ReviewWriteError, match="is a directory"):
        atomic_write_text(target, "<html></html>")


def test_atomic_write_unencodable_text_leaves_no_temp_file(tmp_path: Path) -> None:
    target = tmp_path / "manifest.json"
    target.write_text("previous\n", encoding="utf-8")
    with pytest.raises(ReviewWriteError, match="write"):
        atomic_write_text(target, '{"key": "en|iPhone_Air|caf\udcff"}')
    assert target.read_text(encoding="utf-8") == "previous\n"
    assert [path.name for path in tmp_path.iterdir()] == ["manifest.json"]
