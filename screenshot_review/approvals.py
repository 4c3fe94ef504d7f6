"""Approval ledger persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from screenshot_review.errors import ReviewInputError
from screenshot_review.utils import atomic_write_text

LOGGER = logging.getLogger("screenshot_review.approvals")

APPROVALS_FILENAME = "approved.json"


@dataclass(frozen=True)
class LedgerMerge:
    """Result of unioning candidate keys into a ledger."""

    ledger: frozenset[str]
    matched: int
    added: tuple[str, ...]


def load_approvals(approval_path: Path) -> set[str]:
    """Load approved review keys. A missing file is an empty ledger."""

    try:
        text = approval_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return set()
    except OSError as exc:
        raise ReviewInputError(f"read approvals {approval_path}: {exc}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ReviewInputError(f"read approvals {approval_path}: {exc}") from exc
    if not isinstance(payload, list) or not all(isinstance(item, str) for item in payload):
        raise ReviewInputError(
            f"read approvals {approval_path}: expected a JSON array of review keys"
        )
    return {item.strip() for item in payload if item.strip()}


def render_approvals(keys: Iterable[str]) -> str:
    return json.dumps(sorted(set(keys)), indent=2, ensure_ascii=False) + "\n"


def save_approvals(approval_path: Path, keys: Iterable[str]) -> Path:
    """Persist the ledger in sorted order so reruns produce stable diffs."""

    return atomic_write_text(approval_path, render_approvals(keys))


def merge_approvals(ledger: Iterable[str], candidates: Iterable[str]) -> LedgerMerge:
    """Union candidates into ledger. Keys already present count as matched only."""

    existing = frozenset(ledger)
    wanted = frozenset(candidates)
    added = tuple(sorted(wanted - existing))
    return LedgerMerge(ledger=existing | wanted, matched=len(wanted), added=added)
