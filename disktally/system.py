from __future__ import annotations
import os
import psutil

MAX_DEFAULT_WORKERS = 32

def available_parallelism() -> int:
    n = psutil.cpu_count(logical=True)
    if not n:
        n = os.cpu_count()
    return max(1, int(n or 1))

def default_workers() -> int:
    # stat() is I/O bound, so the budget is the CPU count, capped for big hosts
    return min(available_parallelism(), MAX_DEFAULT_WORKERS)
