"""Shared fixtures for review tests."""

import os
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image


def write_png(path: Path, width: int, height: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (width, height), (40, 90, 180)).save(path, format="PNG")
    return path


@pytest.fixture
def make_png() -> Callable[[Path, int, int], Path]:
    return write_png


@pytest.fixture
def review_tree(tmp_path: Path) -> dict[str, Path]:
    """Raw home.png plus framed en/iPhone_Air/{home,details}.png and one approval."""

    raw_dir = tmp_path / "raw"
    framed_dir = tmp_path / "framed"
    output_dir = tmp_path / "review"
    write_png(raw_dir / "home.png", 1320, 2868)
    write_png(framed_dir / "en" / "iPhone_Air" / "home.png", 1320, 2868)
    write_png(framed_dir / "en" / "iPhone_Air" / "details.png", 1000, 1000)
    output_dir.mkdir(parents=True)
    (output_dir / "approved.json").write_text('["en|iPhone_Air|home"]', encoding="utf-8")
    return {"raw": raw_dir, "framed": framed_dir, "output": output_dir}


def write_non_utf8_png(directory: Path, width: int, height: int) -> Path:
    """Write caf\\xff.png into directory, skipping where the filesystem refuses the name."""

    source = write_png(directory / "cafe.png", width, height)
    target = os.fsencode(directory) + b"/caf\xff.png"
    try:
        os.rename(os.fsencode(source), target)
    except OSError:
        pytest.skip("filesystem does not allow non UTF-8 file names")
    return Path(os.fsdecode(target))


@pytest.fixture
def make_non_utf8_png() -> Callable[[Path, int, int], Path]:
    return write_non_utf8_png
