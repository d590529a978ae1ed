"""Command-line front end: ``fnorm [--dry-run] FILE...``."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from .batch import process_paths
from .config import load_rules
from .errors import ConfigError, FnormError
from .logger import setup_logging
from .models import OutcomeKind, RenameOutcome
from .rename import recover_orphans

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2

EPILOG = """\
examples:
  fnorm "My Document.PDF"              # -> my-document.pdf
  fnorm "Photo & Video.mov"            # -> photo-and-video.mov
  fnorm "tcp/udp guide.txt"            # -> tcp-or-udp-guide.txt
  fnorm --dry-run "File With Spaces.txt"
"""


def _version() -> str:
    try:
        return version("fnorm")
    except PackageNotFoundError:
        return "0.0.0"


def _print_outcome(outcome: RenameOutcome, dry_run: bool) -> None:
    if outcome.kind is OutcomeKind.UNCHANGED:
        if not dry_run:
            print(f"✓ {outcome.old_name} (no changes needed)")
    elif outcome.kind is OutcomeKind.WOULD_RENAME:
        print(f"Would rename: {outcome.old_name} -> {outcome.new_name}")
    else:
        print(f"Renamed: {outcome.old_name} -> {outcome.new_name}")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fnorm",
        description="Normalize filenames to ASCII-only slug format, keeping directory and extension.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("files", nargs="*", metavar="FILE", help="files or directories to rename")
    p.add_argument("--dry-run", action="store_true", help="show what would be renamed without making changes")
    p.add_argument("--config", metavar="PATH", help="TOML file with character rule overrides")
    p.add_argument(
        "--recover",
        metavar="DIR",
        help="first move leftover *.fnorm-tmp entries in DIR back to their original names",
    )
    p.add_argument("--log-file", metavar="PATH", help="also write log records to PATH (rotated at 5 MB)")
    p.add_argument("-v", "--verbose", action="count", default=0, help="log more (repeat for debug)")
    p.add_argument("--version", action="version", version=f"fnorm {_version()}")
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    setup_logging(level, Path(args.log_file) if args.log_file else None)

    if not args.files and not args.recover:
        print("Error: No files specified", file=sys.stderr)
        print("Use -h or --help for usage information", file=sys.stderr)
        return EXIT_USAGE

    try:
        rules = load_rules(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    status = EXIT_OK

    if args.recover:
        try:
            for outcome in recover_orphans(Path(args.recover), dry_run=args.dry_run):
                _print_outcome(outcome, args.dry_run)
        except FnormError as exc:
            print(f"Error recovering {args.recover}: {exc}", file=sys.stderr)
            status = EXIT_FAILURES

    report = process_paths(args.files, rules, dry_run=args.dry_run)
    for outcome in report.outcomes:
        _print_outcome(outcome, args.dry_run)

    for failure in report.failures:
        print(f"Error processing {failure.path}: {failure.message}", file=sys.stderr)

    if not report.ok:
        status = EXIT_FAILURES
    return status


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
