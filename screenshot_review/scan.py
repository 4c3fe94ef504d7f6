"""Directory walks feeding review generation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from screenshot_review.errors import ReviewInputError
from screenshot_review.probe import IMAGE_EXTENSIONS, is_image_file

LOGGER = logging.getLogger("screenshot_review.scan")


@dataclass(frozen=True)
class FramedCandidate:
    """A framed image found at <framed_dir>/<locale>/<device>/<id>.<ext>."""

    locale: str
    device: str
    screenshot_id: str
    path: Path

    @property
    def sort_key(self) -> tuple[str, str, str]:
        return (self.locale, self.device, self.screenshot_id)


def _sorted_listing(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        raise ReviewInputError(f"read framed directory: {exc}") from exc


def _usable_name(entry: os.DirEntry[str]) -> bool:
    """Hidden names and names that are not valid UTF-8 are skipped."""

    if entry.name.startswith("."):
        return False
    try:
        entry.name.encode("utf-8")
    except UnicodeEncodeError:
        LOGGER.warning("Skipping %r: file name is not valid UTF-8", entry.path)
        return False
    return True


def iter_framed_candidates(framed_dir: Path) -> Iterator[FramedCandidate]:
    """Yield framed images in locale, device, screenshot id order.

    Only the two-level ``locale/device/*.png`` shape is considered; other
    files and deeper directories are skipped.
    """

    for locale_entry in _sorted_listing(framed_dir):
        if not _usable_name(locale_entry) or not locale_entry.is_dir():
            continue
        for device_entry in _sorted_listing(Path(locale_entry.path)):
            if not _usable_name(device_entry) or not device_entry.is_dir():
                continue
            images = _pick_images(_sorted_listing(Path(device_entry.path)))
            for screenshot_id in sorted(images):
                yield FramedCandidate(
                    locale=locale_entry.name,
                    device=device_entry.name,
                    screenshot_id=screenshot_id,
                    path=images[screenshot_id],
                )


def _pick_images(entries: list[os.DirEntry[str]]) -> dict[str, Path]:
    """Map file stem to image path, preferring extensions in IMAGE_EXTENSIONS order."""

    picked: dict[str, Path] = {}
    for entry in entries:
        path = Path(entry.path)
        if not _usable_name(entry) or not entry.is_file() or not is_image_file(path):
            continue
        current = picked.get(path.stem)
        if current is None or _extension_rank(path) < _extension_rank(current):
            if current is not None:
                LOGGER.warning("Multiple images for %s, using %s", path.stem, path.name)
            picked[path.stem] = path
        else:
            LOGGER.warning("Multiple images for %s, using %s", path.stem, current.name)
    return picked


def _extension_rank(path: Path) -> int:
    return IMAGE_EXTENSIONS.index(path.suffix.lower())


def index_raw_dir(raw_dir: Path | None) -> dict[str, Path]:
    """Map screenshot id to raw image path.

    A missing or unreadable raw directory yields an empty index. When one id
    exists with several extensions, the earliest in IMAGE_EXTENSIONS wins.
    """

    if raw_dir is None:
        return {}
    try:
        with os.scandir(raw_dir) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        LOGGER.info("Raw directory unavailable, treating all entries as missing raw: %s", exc)
        return {}

    return _pick_images(entries)
