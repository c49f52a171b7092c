from __future__ import annotations
import enum
from dataclasses import dataclass, fields
from typing import Iterable

class Mode(enum.Enum):
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"
    BOTH = "both"

@dataclass(frozen=True)
class DirStats:
    bytes: int = 0
    image_bytes: int = 0
    file_count: int = 0
    folder_count: int = 0
    image_count: int = 0
    # entries dropped from the totals because of an OSError
    skipped: int = 0
    # False when the walk was cancelled before finishing
    complete: bool = True

    @classmethod
    def accumulate(cls, records: Iterable["DirStats"]) -> "DirStats":
        """Field-wise sum of ``records``; the zero record for an empty input."""
        total = {f.name: 0 for f in fields(cls) if f.name != "complete"}
        complete = True
        for r in records:
            for name in total:
                total[name] += getattr(r, name)
            complete = complete and r.complete
        return cls(complete=complete, **total)

    def __add__(self, other: "DirStats") -> "DirStats":
        if not isinstance(other, DirStats):
            return NotImplemented
        return DirStats.accumulate((self, other))

def merge(records: Iterable[DirStats]) -> DirStats:
    return DirStats.accumulate(records)

@dataclass
class RunResult:
    mode: Mode               # SEQUENTIAL or CONCURRENT, never BOTH
    root: str
    stats: DirStats
    elapsed_sec: float
