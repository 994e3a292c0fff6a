#!/usr/bin/env python3
"""
dupehash CLI — Command line interface for finding duplicate files by content hash.
Reports summary counters and, on request, every group of files sharing a fingerprint.
Files are never modified: the tool only reads and reports.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import json
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install -e .", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupehash.core.models import (
    CollisionTable, ScanParams, ScanStats, HashAlgorithmName,
    DEFAULT_MIN_SIZE_BYTES, DEFAULT_WORKERS,
)
from dupehash.commands import DuplicateScanCommand
from dupehash.utils.convert_utils import ConvertUtils
from dupehash.aliases import ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT, EPILOG_TEXT


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments. Stray positional arguments are fatal."""
        parser = argparse.ArgumentParser(
            description="dupehash — Find duplicate files by size and content hash",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--path", "-p",
            default=".",
            type=str,
            help="Directory to recurse over. Default: current directory"
        )
        parser.add_argument(
            "--min-bytes", "-b",
            default=str(DEFAULT_MIN_SIZE_BYTES),
            type=str,
            metavar='',
            dest="min_bytes",
            help=f"Minimum size for a file to be compared (e.g., 256, 1K, 2MB). "
                 f"Default: {DEFAULT_MIN_SIZE_BYTES}"
        )
        parser.add_argument(
            "--threads", "-j",
            default=DEFAULT_WORKERS,
            type=int,
            metavar='',
            help=f"Number of concurrent hashing workers. Default: {DEFAULT_WORKERS}"
        )
        parser.add_argument(
            "--thorough", "-T",
            action="store_true",
            help="Append an MD5 digest to every fingerprint"
        )
        parser.add_argument(
            "--list-collisions", "-L",
            action="store_true",
            dest="list_collisions",
            help="List files for which matches were found, one group per line"
        )
        parser.add_argument(
            "--algorithm", "-a",
            choices=ALGORITHM_CHOICES,
            default="sha512",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress the summary (the collision listing is still printed)"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress and debug logging"
        )

        parsed, extras = parser.parse_known_args(args)
        if extras:
            if not extras[0].startswith("-"):
                CLIApplication.error_exit(
                    f"Unexpected argument: {extras[0]}. "
                    f"Did you mean '--path' or is there a space in your path name?"
                )
            parser.error(f"unrecognized arguments: {' '.join(extras)}")
        return parsed

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before any scanning begins."""
        if args.threads < 1:
            self.error_exit("--threads/-j must be >= 1")

        root_path = Path(args.path)
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.path}")

        if not ConvertUtils.is_valid_size_format(args.min_bytes):
            self.error_exit(f"Invalid size format: {args.min_bytes}")

        if args.algorithm not in ALGORITHM_ALIASES:
            self.error_exit(
                f"Invalid algorithm: '{args.algorithm}'.\n"
                f"Valid options: {', '.join(ALGORITHM_CHOICES)}"
            )

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams.from_human_readable(
                root_dir=args.path,
                min_size_str=args.min_bytes,
                workers=args.threads,
                thorough=args.thorough,
                list_collisions=args.list_collisions,
                algorithm=ALGORITHM_ALIASES.get(args.algorithm, HashAlgorithmName.SHA512),
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files hashed...")
        sys.stderr.flush()

    def run_scan(self, params: ScanParams) -> tuple[CollisionTable, ScanStats]:
        """Execute the scan workflow."""
        command = DuplicateScanCommand()
        if self.verbose:
            mode = params.algorithm.display_name
            if params.thorough:
                mode += f" + {params.secondary_algorithm.display_name}"
            print(f"Hashing with {mode} using {params.workers} worker(s), "
                  f"minimum size {ConvertUtils.bytes_to_human(params.min_size_bytes)}...")

        try:
            collisions, stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
            )
        except Exception as e:
            self.error_exit(f"Scan failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
        return collisions, stats

    def output_summary(self, stats: ScanStats) -> None:
        """Print the scan counters."""
        if self.quiet:
            return
        print(stats.print_summary())

    @staticmethod
    def format_collisions(collisions: CollisionTable) -> List[str]:
        """One line per bucket: every path double-quoted, separated by spaces."""
        return [
            " ".join(json.dumps(path, ensure_ascii=False) for path in paths)
            for paths in collisions.values()
        ]

    def output_collisions(self, collisions: CollisionTable) -> None:
        """Output collision groups in the table's own order."""
        for line in self.format_collisions(collisions):
            print(line)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        elif self.quiet:
            logging.getLogger().setLevel(logging.ERROR)

        self.validate_args(args)
        params = self.create_params(args)

        if self.verbose:
            print(f"Scanning directory: {params.root_dir}")

        collisions, stats = self.run_scan(params)
        self.output_summary(stats)

        if stats.read_errors:
            self.warning(f"{stats.read_errors} file(s) could not be read and were skipped")

        if params.list_collisions and collisions:
            self.output_collisions(collisions)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
