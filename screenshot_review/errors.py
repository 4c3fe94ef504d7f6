"""Error types raised by the review pipeline."""

from __future__ import annotations


class ReviewError(RuntimeError):
    """Base error for review operations."""


class ReviewUsageError(ReviewError):
    """Missing or conflicting configuration supplied by the caller."""


class ReviewInputError(ReviewError):
    """An input artifact could not be read or parsed."""


class ReviewWriteError(ReviewError):
    """An artifact could not be written."""


class LauncherError(ReviewError):
    """The platform launcher failed to open a file."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode
