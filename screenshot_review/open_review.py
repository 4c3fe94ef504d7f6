"""Open the review HTML report with the platform's default application."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from screenshot_review.errors import LauncherError, ReviewInputError, ReviewUsageError
from screenshot_review.generate import HTML_FILENAME
from screenshot_review.utils import absolute_path

LOGGER = logging.getLogger("screenshot_review.open")

Launcher = Callable[[Path], None]


@dataclass(frozen=True)
class OpenOutcome:
    html_path: Path
    opened: bool

    def to_dict(self) -> dict[str, object]:
        return {"html_path": str(self.html_path), "opened": self.opened}


def launch_default_app(path: Path) -> None:
    """Hand path to open (macOS), xdg-open (Linux) or the Windows shell."""

    if sys.platform == "win32":
        try:
            os.startfile(str(path))  # type: ignore[attr-defined]
        except OSError as exc:
            raise LauncherError(f"open {path}: {exc}") from exc
        return

    command = ["open", str(path)] if sys.platform == "darwin" else ["xdg-open", str(path)]
    try:
        completed = subprocess.run(command, check=False, capture_output=True, text=True)
    except OSError as exc:
        raise LauncherError(f"open {path}: {exc}") from exc
    if completed.returncode != 0:
        detail = completed.stderr.strip() or f"exit status {completed.returncode}"
        raise LauncherError(f"open {path}: {detail}", returncode=completed.returncode)


def resolve_html_path(output_dir: Path | None, html_path: Path | None) -> Path:
    if html_path is not None:
        return absolute_path(html_path)
    if output_dir is None:
        raise ReviewUsageError("--output-dir or --html-path is required")
    return absolute_path(output_dir / HTML_FILENAME)


def open_review(
    output_dir: Path | None,
    html_path: Path | None = None,
    dry_run: bool = False,
    launcher: Launcher = launch_default_app,
) -> OpenOutcome:
    """Resolve the report path and open it unless dry_run is set."""

    resolved = resolve_html_path(output_dir, html_path)
    if not resolved.is_file():
        raise ReviewInputError(f"review HTML not found: {resolved}")
    if dry_run:
        return OpenOutcome(html_path=resolved, opened=False)

    launcher(resolved)
    LOGGER.info("Opened %s", resolved)
    return OpenOutcome(html_path=resolved, opened=True)
