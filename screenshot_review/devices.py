"""Known framed output sizes per device."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from screenshot_review.errors import ReviewInputError
from screenshot_review.utils import Resolution, parse_resolution

DeviceSizes = Mapping[str, tuple[Resolution, ...]]

# Portrait App Store display sizes for each frame device slug.
DEFAULT_DEVICE_SIZES: dict[str, tuple[Resolution, ...]] = {
    "iPhone_17_Pro_Max": (Resolution(1320, 2868),),
    "iPhone_17_Pro": (Resolution(1206, 2622),),
    "iPhone_17": (Resolution(1206, 2622),),
    "iPhone_Air": (Resolution(1260, 2736), Resolution(1320, 2868)),
    "iPhone_16e": (Resolution(1170, 2532),),
    "iPad_Pro_13_M4": (Resolution(2064, 2752),),
    "iPad_Pro_11_M4": (Resolution(1668, 2420),),
}


def is_known_size(device: str, size: Resolution, table: DeviceSizes) -> bool:
    """Return True if size (either orientation) is listed for device."""

    for expected in table.get(device, ()):
        if size == expected or size == expected.swapped():
            return True
    return False


def load_device_sizes(path: Path) -> dict[str, tuple[Resolution, ...]]:
    """Load a device table from JSON like {"iPhone_Air": ["1260x2736"]}."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ReviewInputError(f"read device sizes {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ReviewInputError(f"read device sizes {path}: expected a JSON object")

    table: dict[str, tuple[Resolution, ...]] = {}
    for device, value in payload.items():
        values = [value] if isinstance(value, str) else value
        if not isinstance(values, list) or not all(isinstance(item, str) for item in values):
            raise ReviewInputError(
                f"read device sizes {path}: {device} must be a size string or list of them"
            )
        try:
            table[str(device)] = tuple(parse_resolution(item) for item in values)
        except ValueError as exc:
            raise ReviewInputError(f"read device sizes {path}: {exc}") from exc
    return table
