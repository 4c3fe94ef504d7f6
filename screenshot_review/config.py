"""Default locations for review artifacts."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from screenshot_review.errors import ReviewUsageError
from screenshot_review.generate import DEFAULT_CONCURRENCY

RAW_DIR_ENV_VAR = "SCREENSHOT_REVIEW_RAW_DIR"
FRAMED_DIR_ENV_VAR = "SCREENSHOT_REVIEW_FRAMED_DIR"
OUTPUT_DIR_ENV_VAR = "SCREENSHOT_REVIEW_OUTPUT_DIR"
CONCURRENCY_ENV_VAR = "SCREENSHOT_REVIEW_CONCURRENCY"

DEFAULT_RAW_DIR = "./screenshots/raw"
DEFAULT_FRAMED_DIR = "./screenshots/framed"
DEFAULT_OUTPUT_DIR = "./screenshots/review"


@dataclass(frozen=True)
class ReviewDefaults:
    raw_dir: str
    framed_dir: str
    output_dir: str
    concurrency: int


def build_review_defaults() -> ReviewDefaults:
    """Read CLI defaults from the environment, falling back to ./screenshots/*."""

    concurrency_value = os.getenv(CONCURRENCY_ENV_VAR, "").strip()
    try:
        concurrency = int(concurrency_value) if concurrency_value else DEFAULT_CONCURRENCY
    except ValueError as exc:
        raise ReviewUsageError(f"{CONCURRENCY_ENV_VAR} must be an integer: {concurrency_value}") from exc
    return ReviewDefaults(
        raw_dir=os.getenv(RAW_DIR_ENV_VAR, DEFAULT_RAW_DIR),
        framed_dir=os.getenv(FRAMED_DIR_ENV_VAR, DEFAULT_FRAMED_DIR),
        output_dir=os.getenv(OUTPUT_DIR_ENV_VAR, DEFAULT_OUTPUT_DIR),
        concurrency=max(concurrency, 1),
    )


def optional_path(value: str | None) -> Path | None:
    value = (value or "").strip()
    return Path(value) if value else None
