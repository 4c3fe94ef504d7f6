"""Shared utilities for parsing and atomic file writes."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from screenshot_review.errors import ReviewWriteError


@dataclass(frozen=True)
class Resolution:
    """Pixel resolution container."""

    width: int
    height: int

    def swapped(self) -> Resolution:
        return Resolution(width=self.height, height=self.width)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


def parse_resolution(value: str) -> Resolution:
    """Parse resolution string like 1320x2868 into a Resolution."""

    if "x" not in value.lower():
        raise ValueError(f"Invalid resolution format: {value}")
    width_str, height_str = value.lower().split("x", maxsplit=1)
    width = int(width_str)
    height = int(height_str)
    if width <= 0 or height <= 0:
        raise ValueError(f"Resolution must be positive: {value}")
    return Resolution(width=width, height=height)


def parse_csv(value: str | None) -> list[str]:
    """Split a comma-separated flag value, dropping blank items."""

    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def atomic_write_text(path: Path, text: str) -> Path:
    """Write text to path via a sibling temp file and rename.

    Readers never observe a partially written file: the destination only
    changes at the final ``os.replace``. Symlinks and directories at the
    destination are refused rather than replaced.
    """

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ReviewWriteError(f"create directory {path.parent}: {exc}") from exc

    if path.is_symlink():
        raise ReviewWriteError(f"refusing to overwrite symlink {path}")
    if path.is_dir():
        raise ReviewWriteError(f"output path {path} is a directory")

    try:
        fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise ReviewWriteError(f"write {path}: {exc}") from exc

    temp_path = Path(temp_name)
    replaced = False
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, path)
        replaced = True
    except (OSError, UnicodeError) as exc:
        raise ReviewWriteError(f"write {path}: {exc}") from exc
    finally:
        if not replaced:
            temp_path.unlink(missing_ok=True)
    return path


def relative_or_absolute(path: Path, base: Path) -> str:
    """Return path relative to base when possible, else absolute, in POSIX form."""

    try:
        return Path(os.path.relpath(path, base)).as_posix()
    except ValueError:
        return absolute_path(path).as_posix()


def absolute_path(path: Path) -> Path:
    """Make path absolute and normalised without following symlinks."""

    return Path(os.path.abspath(path.expanduser()))
