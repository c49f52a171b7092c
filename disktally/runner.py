from __future__ import annotations
import logging
import os
import time
from typing import List, Optional

from .models import Mode, RunResult
from .scanner import CancelCb, scan_concurrent, scan_sequential

log = logging.getLogger(__name__)

def check_root(path: str) -> str:
    """Absolute form of ``path``; raises if it is not an existing directory."""
    ap = os.path.abspath(path)
    if not os.path.exists(ap):
        raise FileNotFoundError(f"no such directory: {ap}")
    if not os.path.isdir(ap):
        raise NotADirectoryError(f"not a directory: {ap}")
    return ap

def _timed(mode: Mode, root: str, **opts) -> RunResult:
    log.info("%s scan of %s started", mode.value, root)
    t0 = time.perf_counter()
    if mode is Mode.SEQUENTIAL:
        opts.pop("max_workers", None)
        opts.pop("max_dir_tasks", None)
        stats = scan_sequential(root, **opts)
    else:
        stats = scan_concurrent(root, **opts)
    elapsed = time.perf_counter() - t0
    log.info("%s scan of %s finished in %.3fs (%d skipped)", mode.value, root, elapsed, stats.skipped)
    return RunResult(mode=mode, root=root, stats=stats, elapsed_sec=elapsed)

def run(root: str,
        mode: Mode,
        *,
        max_workers: Optional[int] = None,
        max_dir_tasks: Optional[int] = None,
        case_sensitive: bool = False,
        follow_symlinks: bool = False,
        cancel_flag: Optional[CancelCb] = None) -> List[RunResult]:
    """Run the traversal(s) selected by ``mode`` over ``root``.

    ``Mode.BOTH`` makes two independent passes, concurrent first.
    """
    opts = dict(max_workers=max_workers,
                max_dir_tasks=max_dir_tasks,
                case_sensitive=case_sensitive,
                follow_symlinks=follow_symlinks,
                cancel_flag=cancel_flag)
    if mode is Mode.SEQUENTIAL:
        order = [Mode.SEQUENTIAL]
    elif mode is Mode.CONCURRENT:
        order = [Mode.CONCURRENT]
    else:
        order = [Mode.CONCURRENT, Mode.SEQUENTIAL]

    results: List[RunResult] = []
    for m in order:
        res = _timed(m, root, **opts)
        results.append(res)
        if not res.stats.complete:
            break
    return results
