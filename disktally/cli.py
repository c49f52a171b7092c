"""Command-line front door for disktally.

Parses options, validates the root directory, runs the selected traversal
modes on a background thread and prints the report.
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from typing import List, Optional, Sequence

from .models import RunResult
from .report import format_report
from .runner import Mode, check_root, run
from .scanner import CancelFlag

log = logging.getLogger(__name__)

EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

DESCRIPTION = """Summarize disk usage of a directory, recursively.

You MUST specify one of the parameters, -s, -d, or -b
-s       Run in single threaded mode
-d       Run in parallel mode (uses all available processors)
-b       Run in both single threaded and parallel mode.
         Runs parallel followed by sequential mode"""

def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="disktally",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    modes = parser.add_mutually_exclusive_group(required=True)
    modes.add_argument("-s", dest="mode", action="store_const", const=Mode.SEQUENTIAL,
                       help="run in single threaded mode")
    modes.add_argument("-d", dest="mode", action="store_const", const=Mode.CONCURRENT,
                       help="run in parallel mode")
    modes.add_argument("-b", dest="mode", action="store_const", const=Mode.BOTH,
                       help="run parallel, then single threaded")
    parser.add_argument("path", help="directory to summarize")
    parser.add_argument("--workers", type=_positive_int, default=None,
                        help="file workers for parallel mode (default: logical CPUs)")
    parser.add_argument("--dir-tasks", type=_positive_int, default=None,
                        help="concurrent directory tasks for parallel mode (default: --workers)")
    parser.add_argument("--case-sensitive", action="store_true",
                        help="match image extensions case-sensitively")
    parser.add_argument("--follow-symlinks", action="store_true",
                        help="follow symbolic links (no cycle detection)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log skipped entries to stderr")
    return parser

class ScanThread(threading.Thread):
    """Runs the traversal off the main thread so Ctrl-C can cancel it."""

    def __init__(self, root: str, mode: Mode, **opts):
        super().__init__(name="disktally-scan", daemon=True)
        self.root = root
        self.mode = mode
        self.opts = opts
        self.cancel_flag = CancelFlag()
        self.results: List[RunResult] = []
        self.error: Optional[Exception] = None

    def run(self):
        try:
            self.results = run(self.root, self.mode, cancel_flag=self.cancel_flag, **self.opts)
        except Exception as e:
            self.error = e

def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        root = check_root(args.path)
    except OSError as e:
        print(f"disktally: {e}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    worker = ScanThread(
        root,
        args.mode,
        max_workers=args.workers,
        max_dir_tasks=args.dir_tasks,
        case_sensitive=args.case_sensitive,
        follow_symlinks=args.follow_symlinks,
    )
    worker.start()
    interrupted = False
    while worker.is_alive():
        try:
            worker.join(0.1)
        except KeyboardInterrupt:
            log.warning("interrupted, finishing with partial totals")
            worker.cancel_flag.cancel()
            interrupted = True

    if worker.error is not None:
        if isinstance(worker.error, OSError):
            print(f"disktally: {worker.error}", file=sys.stderr)
            return EXIT_USAGE
        raise worker.error

    print(format_report(root, worker.results))
    return EXIT_INTERRUPTED if interrupted else 0

if __name__ == "__main__":
    raise SystemExit(main())
