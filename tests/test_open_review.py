"""Tests for opening the review report."""

import subprocess
import sys
from pathlib import Path

import pytest

from screenshot_review.errors import LauncherError, ReviewInputError, ReviewUsageError
from screenshot_review.open_review import launch_default_app, open_review


@pytest.fixture
def html_path(tmp_path: Path) -> Path:
    output_dir = tmp_path / "review"
    output_dir.mkdir()
    path = output_dir / "index.html"
    path.write_text("<html><body>ok</body></html>", encoding="utf-8")
    return path


def _fail_launcher(path: Path) -> None:
    raise AssertionError(f"launcher should not run for {path}")


def test_dry_run_resolves_default_path(html_path: Path) -> None:
    outcome = open_review(html_path.parent, dry_run=True, launcher=_fail_launcher)
    assert outcome.html_path == html_path
    assert outcome.html_path.is_absolute()
    assert outcome.opened is False


def test_open_invokes_launcher(html_path: Path) -> None:
    launched: list[Path] = []
    outcome = open_review(None, html_path=html_path, launcher=launched.append)
    assert outcome.opened is True
    assert launched == [html_path]


def test_launcher_failure_propagates(html_path: Path) -> None:
    def broken(path: Path) -> None:
        raise LauncherError(f"open {path}: no browser")

    with pytest.raises(LauncherError, match="no browser"):
        open_review(html_path.parent, launcher=broken)


def test_missing_html_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ReviewInputError, match="review HTML not found"):
        open_review(tmp_path, dry_run=True, launcher=_fail_launcher)


def test_requires_a_location() -> None:
    with pytest.raises(ReviewUsageError):
        open_review(None, dry_run=True, launcher=_fail_launcher)


def test_symlinked_output_dir_is_not_resolved(html_path: Path, tmp_path: Path) -> None:
    link = tmp_path / "review-link"
    link.symlink_to(html_path.parent, target_is_directory=True)
    outcome = open_review(link, dry_run=True, launcher=_fail_launcher)
    assert outcome.html_path == link / "index.html"


def test_default_launcher_reports_exit_status(
    html_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 3, stdout="", stderr="no handler")

    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(LauncherError, match="no handler") as excinfo:
        launch_default_app(html_path)
    assert excinfo.value.returncode == 3
