from __future__ import annotations
from typing import Iterable, List

from .models import Mode, RunResult

MODE_TITLES = {Mode.SEQUENTIAL: "Sequential", Mode.CONCURRENT: "Parallel"}
BYTE_UNITS = ("KB", "MB", "GB", "TB", "PB")

def format_count(num: int) -> str:
    return f"{num:,}"

def format_bytes(num: int) -> str:
    if num < 1024:
        return f"{format_count(num)} B" if num >= 0 else str(num)
    size = num / 1024.0
    for unit in BYTE_UNITS[:-1]:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:,.2f} {BYTE_UNITS[-1]}"

def format_run(result: RunResult) -> str:
    s = result.stats
    lines = [
        f"{MODE_TITLES[result.mode]} Calculated in: {result.elapsed_sec:.6f}s",
        f"{format_count(s.folder_count)} folders, {format_count(s.file_count)} files, "
        f"{format_count(s.bytes)} bytes ({format_bytes(s.bytes)})",
    ]
    if s.image_count == 0:
        lines.append("no image files found in the directory")
    else:
        lines.append(f"{format_count(s.image_count)} image files, {format_count(s.image_bytes)} bytes")
    if s.skipped:
        lines.append(f"{format_count(s.skipped)} items skipped due to errors")
    if not s.complete:
        lines.append("scan interrupted, totals are incomplete")
    return "\n".join(lines)

def format_report(root: str, results: Iterable[RunResult]) -> str:
    blocks: List[str] = [f"Directory '{root}':"]
    for r in results:
        blocks.append("")
        blocks.append(format_run(r))
    return "\n".join(blocks)
