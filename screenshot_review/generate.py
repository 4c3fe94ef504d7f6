"""Review generation: scan framed output, match raw captures, classify, persist."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

import anyio
import anyio.lowlevel

from screenshot_review.approvals import APPROVALS_FILENAME, load_approvals
from screenshot_review.devices import DEFAULT_DEVICE_SIZES, DeviceSizes, is_known_size
from screenshot_review.manifest import (
    ReviewEntry,
    ReviewManifest,
    ReviewSummary,
    derive_status,
    review_key,
    utc_timestamp,
    write_manifest,
)
from screenshot_review.probe import Prober, probe_image
from screenshot_review.report import write_review_html
from screenshot_review.scan import FramedCandidate, index_raw_dir, iter_framed_candidates
from screenshot_review.utils import absolute_path

LOGGER = logging.getLogger("screenshot_review.generate")

MANIFEST_FILENAME = "manifest.json"
HTML_FILENAME = "index.html"
DEFAULT_CONCURRENCY = 4


@dataclass(frozen=True)
class GenerateOutcome:
    manifest_path: Path
    html_path: Path
    manifest: ReviewManifest

    @property
    def summary(self) -> ReviewSummary:
        return self.manifest.summary

    def to_dict(self) -> dict[str, object]:
        summary = self.summary
        return {
            "manifest_path": str(self.manifest_path),
            "html_path": str(self.html_path),
            "total": summary.total,
            "ready": summary.ready,
            "missing_raw": summary.missing_raw,
            "invalid_size": summary.invalid_size,
            "approved": summary.approved,
            "pending": summary.pending_approval,
        }


def classify_entry(
    candidate: FramedCandidate,
    raw_index: Mapping[str, Path],
    approved_keys: set[str] | frozenset[str],
    device_sizes: DeviceSizes = DEFAULT_DEVICE_SIZES,
    prober: Prober = probe_image,
) -> ReviewEntry:
    """Build a ReviewEntry from one framed candidate.

    ``has_raw`` and ``size_valid`` are evaluated independently. Without a raw
    counterpart the framed size must be a known size for the device.
    """

    framed = prober(candidate.path)
    raw_path = raw_index.get(candidate.screenshot_id)
    raw = prober(raw_path) if raw_path is not None else None
    has_raw = raw is not None and raw.ok

    if not framed.ok:
        size_valid = False
    elif has_raw:
        size_valid = framed.size == raw.size
    else:
        size_valid = is_known_size(candidate.device, framed.size, device_sizes)

    status = derive_status(has_raw, size_valid)
    key = review_key(candidate.locale, candidate.device, candidate.screenshot_id)
    if status != "ready":
        LOGGER.info("%s: %s (framed=%s raw=%s)", key, status, framed.size, raw.size if raw else None)
    return ReviewEntry(
        screenshot_id=candidate.screenshot_id,
        locale=candidate.locale,
        device=candidate.device,
        has_raw=has_raw,
        size_valid=size_valid,
        status=status,
        approved=key in approved_keys,
        framed_path=str(candidate.path),
        raw_path=str(raw_path) if raw_path is not None else None,
        framed_size=framed.size,
        raw_size=raw.size if raw is not None else None,
    )


async def classify_candidates(
    candidates: Iterable[FramedCandidate],
    raw_index: Mapping[str, Path],
    approved_keys: set[str] | frozenset[str],
    device_sizes: DeviceSizes = DEFAULT_DEVICE_SIZES,
    prober: Prober = probe_image,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[ReviewEntry]:
    """Probe candidates on worker threads; return entries in walk order."""

    ordered = sorted(candidates, key=lambda candidate: candidate.sort_key)
    results: list[ReviewEntry | None] = [None] * len(ordered)
    limiter = anyio.CapacityLimiter(max(concurrency, 1))

    async def classify_one(index: int, candidate: FramedCandidate) -> None:
        results[index] = await anyio.to_thread.run_sync(
            classify_entry,
            candidate,
            raw_index,
            approved_keys,
            device_sizes,
            prober,
            limiter=limiter,
        )

    async with anyio.create_task_group() as tg:
        for index, candidate in enumerate(ordered):
            tg.start_soon(classify_one, index, candidate)

    return [entry for entry in results if entry is not None]


async def generate_review(
    framed_dir: Path,
    output_dir: Path,
    raw_dir: Path | None = None,
    approval_path: Path | None = None,
    device_sizes: DeviceSizes = DEFAULT_DEVICE_SIZES,
    concurrency: int = DEFAULT_CONCURRENCY,
    prober: Prober = probe_image,
) -> GenerateOutcome:
    """Write manifest.json and index.html for the framed screenshots.

    The approval ledger is read but never modified here.
    """

    framed_dir = absolute_path(framed_dir)
    output_dir = absolute_path(output_dir)
    approval_path = approval_path or output_dir / APPROVALS_FILENAME

    candidates = list(iter_framed_candidates(framed_dir))
    raw_index = index_raw_dir(absolute_path(raw_dir) if raw_dir else None)
    approved_keys = load_approvals(approval_path)
    LOGGER.info(
        "Found %d framed screenshots, %d raw captures, %d approvals",
        len(candidates),
        len(raw_index),
        len(approved_keys),
    )

    entries = await classify_candidates(
        candidates,
        raw_index,
        approved_keys,
        device_sizes=device_sizes,
        prober=prober,
        concurrency=concurrency,
    )
    manifest = ReviewManifest(
        generated_at=utc_timestamp(),
        framed_dir=str(framed_dir),
        output_dir=str(output_dir),
        entries=tuple(entries),
    )

    # Cancellation must land before the first artifact write.
    await anyio.lowlevel.checkpoint()

    manifest_path = write_manifest(manifest, output_dir / MANIFEST_FILENAME)
    html_path = write_review_html(manifest, output_dir / HTML_FILENAME)
    LOGGER.info("Wrote review manifest %s and report %s", manifest_path, html_path)
    return GenerateOutcome(manifest_path=manifest_path, html_path=html_path, manifest=manifest)
