"""CLI entrypoint for screenshot review."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from functools import partial
from pathlib import Path

import anyio
from dotenv import find_dotenv, load_dotenv

from screenshot_review.approve import ReviewSelector, approve_review
from screenshot_review.config import build_review_defaults, optional_path
from screenshot_review.devices import DEFAULT_DEVICE_SIZES, load_device_sizes
from screenshot_review.errors import ReviewError, ReviewUsageError
from screenshot_review.generate import generate_review
from screenshot_review.open_review import open_review
from screenshot_review.utils import parse_csv

LOGGER = logging.getLogger("screenshot_review.cli")


def build_parser() -> argparse.ArgumentParser:
    defaults = build_review_defaults()
    parser = argparse.ArgumentParser(
        prog="screenshot-review",
        description="Review framed screenshots against raw captures",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser(
        "review-generate",
        help="Generate HTML side-by-side review and JSON manifest",
    )
    generate.add_argument("--raw-dir", default=defaults.raw_dir, help="Directory containing raw screenshots (optional)")
    generate.add_argument("--framed-dir", default=defaults.framed_dir, help="Directory containing framed screenshots")
    generate.add_argument("--output-dir", default=defaults.output_dir, help="Directory for HTML and JSON review artifacts")
    generate.add_argument("--approval-path", default="", help="Approvals file (default: <output-dir>/approved.json)")
    generate.add_argument("--device-sizes", default="", help="JSON file mapping device to accepted WxH sizes")
    generate.add_argument("--concurrency", type=int, default=defaults.concurrency, help="Image probe concurrency")
    generate.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")

    approve = subparsers.add_parser(
        "review-approve",
        help="Write/update approved.json from review manifest selectors",
    )
    approve.add_argument("--output-dir", default=defaults.output_dir, help="Directory containing review artifacts")
    approve.add_argument("--manifest-path", default="", help="Manifest path (default: <output-dir>/manifest.json)")
    approve.add_argument("--approval-path", default="", help="Approvals file (default: <output-dir>/approved.json)")
    approve.add_argument("--all-ready", action="store_true", help="Approve all entries with status=ready")
    approve.add_argument("--key", default="", help="Review key(s) to approve, comma-separated (locale|device|screenshot_id)")
    approve.add_argument("--id", dest="screenshot_id", default="", help="Screenshot ID to approve")
    approve.add_argument("--locale", default="", help="Locale selector/filter")
    approve.add_argument("--device", default="", help="Device selector/filter")
    approve.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")

    open_parser = subparsers.add_parser("review-open", help="Open review HTML report in the default browser")
    open_parser.add_argument("--output-dir", default=defaults.output_dir, help="Directory containing review artifacts")
    open_parser.add_argument("--html-path", default="", help="HTML path (default: <output-dir>/index.html)")
    open_parser.add_argument("--dry-run", action="store_true", help="Resolve the path without opening a browser")
    open_parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    return parser


def _print_result(payload: dict[str, object], pretty: bool) -> None:
    print(json.dumps(payload, indent=2 if pretty else None, ensure_ascii=False))


def _run_generate(args: argparse.Namespace) -> dict[str, object]:
    framed_dir = optional_path(args.framed_dir)
    output_dir = optional_path(args.output_dir)
    if framed_dir is None:
        raise ReviewUsageError("--framed-dir is required")
    if output_dir is None:
        raise ReviewUsageError("--output-dir is required")
    device_sizes_path = optional_path(args.device_sizes)
    device_sizes = load_device_sizes(device_sizes_path) if device_sizes_path else DEFAULT_DEVICE_SIZES

    runner = partial(
        generate_review,
        framed_dir=framed_dir,
        output_dir=output_dir,
        raw_dir=optional_path(args.raw_dir),
        approval_path=optional_path(args.approval_path),
        device_sizes=device_sizes,
        concurrency=args.concurrency,
    )
    return anyio.run(runner).to_dict()


def _run_approve(args: argparse.Namespace) -> dict[str, object]:
    selector = ReviewSelector(
        all_ready=args.all_ready,
        keys=tuple(parse_csv(args.key)),
        screenshot_id=args.screenshot_id.strip(),
        locale=args.locale.strip(),
        device=args.device.strip(),
    )
    output_dir = optional_path(args.output_dir)
    if output_dir is None:
        raise ReviewUsageError("--output-dir is required")
    outcome = approve_review(
        output_dir,
        selector,
        manifest_path=optional_path(args.manifest_path),
        approval_path=optional_path(args.approval_path),
    )
    return outcome.to_dict()


def _run_open(args: argparse.Namespace) -> dict[str, object]:
    outcome = open_review(
        optional_path(args.output_dir),
        html_path=optional_path(args.html_path),
        dry_run=args.dry_run,
    )
    return outcome.to_dict()


COMMANDS = {
    "review-generate": _run_generate,
    "review-approve": _run_approve,
    "review-open": _run_open,
}


def main(argv: list[str] | None = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))

    try:
        parser = build_parser()
    except ReviewUsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    try:
        payload = COMMANDS[args.command](args)
    except ReviewUsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2
    except ReviewError as exc:
        LOGGER.debug("%s failed", args.command, exc_info=True)
        print(f"{args.command}: {exc}", file=sys.stderr)
        return 1

    _print_result(payload, args.pretty)
    return 0


if __name__ == "__main__":
    sys.exit(main())
