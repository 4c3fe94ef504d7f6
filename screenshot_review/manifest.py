"""Review manifest model and JSON persistence."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Literal

from screenshot_review.errors import ReviewInputError
from screenshot_review.utils import Resolution, atomic_write_text

ReviewStatus = Literal["ready", "missing_raw", "invalid_size"]
REVIEW_STATUSES: tuple[str, ...] = ("ready", "missing_raw", "invalid_size")
KEY_SEPARATOR = "|"


def review_key(locale: str, device: str, screenshot_id: str) -> str:
    """Build the locale|device|screenshot_id key for an entry."""

    return KEY_SEPARATOR.join((locale, device, screenshot_id))


def derive_status(has_raw: bool, size_valid: bool) -> ReviewStatus:
    """Collapse the two readiness predicates into a single display label."""

    if not has_raw:
        return "missing_raw"
    if not size_valid:
        return "invalid_size"
    return "ready"


def utc_timestamp(moment: datetime | None = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class ReviewEntry:
    """One framed screenshot under review."""

    screenshot_id: str
    locale: str
    device: str
    has_raw: bool
    size_valid: bool
    status: ReviewStatus
    approved: bool = False
    framed_path: str | None = None
    raw_path: str | None = None
    framed_size: Resolution | None = None
    raw_size: Resolution | None = None

    @property
    def key(self) -> str:
        return review_key(self.locale, self.device, self.screenshot_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "screenshot_id": self.screenshot_id,
            "locale": self.locale,
            "device": self.device,
            "status": self.status,
            "has_raw": self.has_raw,
            "size_valid": self.size_valid,
            "approved": self.approved,
            "framed_path": self.framed_path,
            "raw_path": self.raw_path,
            "framed_width": self.framed_size.width if self.framed_size else None,
            "framed_height": self.framed_size.height if self.framed_size else None,
            "raw_width": self.raw_size.width if self.raw_size else None,
            "raw_height": self.raw_size.height if self.raw_size else None,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> ReviewEntry:
        locale = str(payload.get("locale", ""))
        device = str(payload.get("device", ""))
        screenshot_id = str(payload.get("screenshot_id", ""))
        key = payload.get("key")
        if key is not None and key != review_key(locale, device, screenshot_id):
            parts = str(key).split(KEY_SEPARATOR)
            if len(parts) != 3:
                raise ValueError(f"malformed review key {key!r}")
            locale, device, screenshot_id = parts

        status = payload.get("status")
        if status not in REVIEW_STATUSES:
            raise ValueError(f"unknown status {status!r} for {key or screenshot_id}")
        has_raw = payload.get("has_raw", status != "missing_raw")
        size_valid = payload.get("size_valid", status != "invalid_size")

        return cls(
            screenshot_id=screenshot_id,
            locale=locale,
            device=device,
            has_raw=bool(has_raw),
            size_valid=bool(size_valid),
            status=status,
            approved=bool(payload.get("approved", False)),
            framed_path=payload.get("framed_path"),
            raw_path=payload.get("raw_path"),
            framed_size=_size_from(payload, "framed"),
            raw_size=_size_from(payload, "raw"),
        )


def _size_from(payload: dict[str, Any], prefix: str) -> Resolution | None:
    width = payload.get(f"{prefix}_width")
    height = payload.get(f"{prefix}_height")
    if isinstance(width, int) and isinstance(height, int):
        return Resolution(width=width, height=height)
    return None


@dataclass(frozen=True)
class ReviewSummary:
    """Counts over a manifest's entries.

    ``ready``, ``missing_raw`` and ``invalid_size`` are independent predicate
    counts: one entry may count toward both ``missing_raw`` and
    ``invalid_size``, so they need not add up to ``total``.
    """

    total: int
    ready: int
    missing_raw: int
    invalid_size: int
    approved: int
    pending_approval: int

    @classmethod
    def from_entries(cls, entries: Iterable[ReviewEntry]) -> ReviewSummary:
        entries = list(entries)
        total = len(entries)
        approved = sum(1 for entry in entries if entry.approved)
        return cls(
            total=total,
            ready=sum(1 for entry in entries if entry.status == "ready"),
            missing_raw=sum(1 for entry in entries if not entry.has_raw),
            invalid_size=sum(1 for entry in entries if not entry.size_valid),
            approved=approved,
            pending_approval=total - approved,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "ready": self.ready,
            "missing_raw": self.missing_raw,
            "invalid_size": self.invalid_size,
            "approved": self.approved,
            "pending_approval": self.pending_approval,
        }


@dataclass(frozen=True)
class ReviewManifest:
    """Generated description of every reviewable entry for one run."""

    generated_at: str
    framed_dir: str
    output_dir: str
    entries: tuple[ReviewEntry, ...] = field(default_factory=tuple)

    @property
    def summary(self) -> ReviewSummary:
        return ReviewSummary.from_entries(self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "framed_dir": self.framed_dir,
            "output_dir": self.output_dir,
            "summary": self.summary.to_dict(),
            "entries": [entry.to_dict() for entry in self.entries],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"


def write_manifest(manifest: ReviewManifest, manifest_path: Path) -> Path:
    return atomic_write_text(manifest_path, manifest.to_json())


def _entry_from(item: Any) -> ReviewEntry:
    if not isinstance(item, dict):
        raise ValueError(f"entry must be an object, got {type(item).__name__}")
    return ReviewEntry.from_dict(item)


def load_manifest(manifest_path: Path) -> ReviewManifest:
    """Read a manifest written by review generation."""

    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ReviewInputError(
            f"read manifest {manifest_path}: file not found (run review-generate first)"
        ) from exc
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ReviewInputError(f"read manifest {manifest_path}: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("entries", []), list):
        raise ReviewInputError(f"read manifest {manifest_path}: expected an object with entries")

    try:
        entries = tuple(_entry_from(item) for item in payload.get("entries", []))
    except ValueError as exc:
        raise ReviewInputError(f"read manifest {manifest_path}: {exc}") from exc

    return ReviewManifest(
        generated_at=str(payload.get("generated_at", "")),
        framed_dir=str(payload.get("framed_dir", "")),
        output_dir=str(payload.get("output_dir", "")),
        entries=entries,
    )
