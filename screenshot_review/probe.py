"""Image dimension probing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal

from PIL import Image, UnidentifiedImageError

from screenshot_review.utils import Resolution

LOGGER = logging.getLogger("screenshot_review.probe")

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")

ProbeStatus = Literal["ok", "not_found", "unreadable"]


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of reading an image header."""

    path: Path
    status: ProbeStatus
    size: Resolution | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


Prober = Callable[[Path], ProbeResult]


def is_image_file(path: Path) -> bool:
    return path.suffix.lower() in IMAGE_EXTENSIONS


def probe_image(path: Path) -> ProbeResult:
    """Return pixel dimensions of an image without decoding pixel data."""

    if not path.is_file():
        return ProbeResult(path=path, status="not_found")
    try:
        with Image.open(path) as image:
            width, height = image.size
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as exc:
        LOGGER.debug("Unreadable image %s: %s", path, exc)
        return ProbeResult(path=path, status="unreadable")
    if width <= 0 or height <= 0:
        return ProbeResult(path=path, status="unreadable")
    return ProbeResult(path=path, status="ok", size=Resolution(width=width, height=height))
