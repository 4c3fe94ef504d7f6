"""Approve manifest entries by selector and record them in the ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from screenshot_review.approvals import APPROVALS_FILENAME, load_approvals, merge_approvals, save_approvals
from screenshot_review.errors import ReviewUsageError
from screenshot_review.generate import MANIFEST_FILENAME
from screenshot_review.manifest import ReviewEntry, load_manifest
from screenshot_review.utils import absolute_path

LOGGER = logging.getLogger("screenshot_review.approve")

SELECTOR_HINT = "provide at least one selector: --all-ready, --key, --id, --locale, or --device"


@dataclass(frozen=True)
class ReviewSelector:
    """Which manifest entries to approve.

    Each component selects a set of entries and the sets are unioned.
    ``locale``/``device`` narrow ``screenshot_id`` when it is given and
    select on their own otherwise.
    """

    all_ready: bool = False
    keys: tuple[str, ...] = field(default_factory=tuple)
    screenshot_id: str = ""
    locale: str = ""
    device: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.all_ready or self.keys or self.screenshot_id or self.locale or self.device)

    def _matches_filters(self, entry: ReviewEntry) -> bool:
        if self.locale and entry.locale != self.locale:
            return False
        if self.device and entry.device != self.device:
            return False
        return True

    def select(self, entries: Iterable[ReviewEntry]) -> set[str]:
        entries = list(entries)
        selected: set[str] = set()
        if self.all_ready:
            selected |= {entry.key for entry in entries if entry.status == "ready"}
        if self.keys:
            wanted = set(self.keys)
            selected |= {entry.key for entry in entries if entry.key in wanted}
            unknown = wanted - {entry.key for entry in entries}
            if unknown:
                LOGGER.warning("Keys not present in manifest: %s", ", ".join(sorted(unknown)))
        if self.screenshot_id:
            selected |= {
                entry.key
                for entry in entries
                if entry.screenshot_id == self.screenshot_id and self._matches_filters(entry)
            }
        elif self.locale or self.device:
            selected |= {entry.key for entry in entries if self._matches_filters(entry)}
        return selected


@dataclass(frozen=True)
class ApproveOutcome:
    matched: int
    added: int
    total_approved: int
    keys: tuple[str, ...]
    approval_path: Path

    def to_dict(self) -> dict[str, object]:
        return {
            "matched": self.matched,
            "added": self.added,
            "total_approved": self.total_approved,
            "keys": list(self.keys),
            "approval_path": str(self.approval_path),
        }


def approve_review(
    output_dir: Path,
    selector: ReviewSelector,
    manifest_path: Path | None = None,
    approval_path: Path | None = None,
) -> ApproveOutcome:
    """Union the selected entries into the approval ledger.

    ``keys`` in the outcome lists only the newly approved keys. Concurrent
    runs against one ledger are not coordinated; the last rename wins.
    """

    if selector.is_empty:
        raise ReviewUsageError(SELECTOR_HINT)

    output_dir = absolute_path(output_dir)
    manifest_path = manifest_path or output_dir / MANIFEST_FILENAME
    approval_path = approval_path or output_dir / APPROVALS_FILENAME

    manifest = load_manifest(manifest_path)
    candidates = selector.select(manifest.entries)
    merge = merge_approvals(load_approvals(approval_path), candidates)
    save_approvals(approval_path, merge.ledger)

    LOGGER.info(
        "Matched %d entries, added %d, ledger now has %d keys",
        merge.matched,
        len(merge.added),
        len(merge.ledger),
    )
    return ApproveOutcome(
        matched=merge.matched,
        added=len(merge.added),
        total_approved=len(merge.ledger),
        keys=merge.added,
        approval_path=approval_path,
    )
