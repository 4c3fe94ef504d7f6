"""Tests for the command-line entrypoint."""

import json
from pathlib import Path

import pytest

from screenshot_review.__main__ import main


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in (
        "SCREENSHOT_REVIEW_RAW_DIR",
        "SCREENSHOT_REVIEW_FRAMED_DIR",
        "SCREENSHOT_REVIEW_OUTPUT_DIR",
        "SCREENSHOT_REVIEW_CONCURRENCY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_generate_approve_open(review_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]) -> None:
    output_dir = review_tree["output"]
    exit_code = main(
        [
            "review-generate",
            "--raw-dir", str(review_tree["raw"]),
            "--framed-dir", str(review_tree["framed"]),
            "--output-dir", str(output_dir),
        ]
    )
    assert exit_code == 0
    generated = json.loads(capsys.readouterr().out)
    assert generated["total"] == 2
    assert generated["ready"] == 1
    assert generated["missing_raw"] == 1
    assert generated["invalid_size"] == 1
    assert generated["approved"] == 1
    assert generated["pending"] == 1
    assert Path(generated["manifest_path"]).is_file()
    assert Path(generated["html_path"]).is_file()

    exit_code = main(["review-approve", "--output-dir", str(output_dir), "--all-ready", "--pretty"])
    assert exit_code == 0
    approved = json.loads(capsys.readouterr().out)
    assert approved["matched"] == 1
    assert approved["added"] == 0
    assert approved["total_approved"] == 1
    assert approved["keys"] == []

    exit_code = main(
        [
            "review-approve",
            "--output-dir", str(output_dir),
            "--id", "details",
            "--locale", "en",
            "--device", "iPhone_Air",
        ]
    )
    assert exit_code == 0
    approved = json.loads(capsys.readouterr().out)
    assert approved["keys"] == ["en|iPhone_Air|details"]
    assert approved["total_approved"] == 2

    exit_code = main(["review-open", "--output-dir", str(output_dir), "--dry-run"])
    assert exit_code == 0
    opened = json.loads(capsys.readouterr().out)
    assert opened == {"html_path": str(output_dir / "index.html"), "opened": False}


def test_approve_without_selector(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output_dir = tmp_path / "review"
    exit_code = main(["review-approve", "--output-dir", str(output_dir)])
    captured = capsys.readouterr()
    assert exit_code == 2
    assert captured.out == ""
    assert "provide at least one selector" in captured.err
    assert not (output_dir / "approved.json").exists()


def test_generate_missing_framed_dir(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["review-generate", "--framed-dir", str(tmp_path / "missing-framed")])
    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out == ""
    assert "review-generate: read framed directory" in captured.err


def test_open_missing_html(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["review-open", "--output-dir", str(tmp_path / "review"), "--dry-run"])
    assert exit_code == 1
    assert "review HTML not found" in capsys.readouterr().err


def test_generate_skips_non_utf8_file_names(
    review_tree: dict[str, Path],
    make_non_utf8_png,
    capsys: pytest.CaptureFixture[str],
) -> None:
    make_non_utf8_png(review_tree["framed"] / "en" / "iPhone_Air", 1320, 2868)
    exit_code = main(
        [
            "review-generate",
            "--raw-dir", str(review_tree["raw"]),
            "--framed-dir", str(review_tree["framed"]),
            "--output-dir", str(review_tree["output"]),
        ]
    )
    assert exit_code == 0
    generated = json.loads(capsys.readouterr().out)
    assert generated["total"] == 2
    assert sorted(path.name for path in review_tree["output"].iterdir()) == [
        "approved.json",
        "index.html",
        "manifest.json",
    ]
