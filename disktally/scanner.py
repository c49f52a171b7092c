from __future__ import annotations
import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence, Tuple

from .kinds import is_image
from .models import DirStats, merge
from .system import default_workers

log = logging.getLogger(__name__)

# files handed to one stat task by the concurrent walk
DEFAULT_CHUNK_SIZE = 256

CancelCb = Callable[[], bool]

class CancelFlag:
    def __init__(self):
        self._cancel = threading.Event()

    def cancel(self):
        self._cancel.set()

    def __call__(self):
        return self._cancel.is_set()

def list_dir(path: str, follow_symlinks: bool = False) -> Tuple[List[str], List[str]]:
    """Return ``(subdirs, files)`` directly under ``path``.

    Symlinks are left out unless ``follow_symlinks`` is set, so by default
    linked files and directories are missing from ``file_count`` and
    ``folder_count`` where a plain directory listing would include them.
    Entries whose type cannot be read are dropped. A failure to open or
    iterate ``path`` itself raises ``OSError``.
    """
    subdirs: List[str] = []
    files: List[str] = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                if entry.is_symlink() and not follow_symlinks:
                    continue
                if entry.is_dir(follow_symlinks=follow_symlinks):
                    subdirs.append(entry.path)
                elif entry.is_file(follow_symlinks=follow_symlinks):
                    files.append(entry.path)
            except OSError as e:
                log.debug("cannot classify %s: %s", entry.path, e)
                continue
    return subdirs, files

def file_contribution(path: str,
                      case_sensitive: bool = False,
                      follow_symlinks: bool = False) -> Tuple[int, bool]:
    st = os.stat(path, follow_symlinks=follow_symlinks)
    return int(st.st_size), is_image(path, case_sensitive=case_sensitive)

class _Tally:
    """Running byte/image sums for the immediate files of one directory."""

    __slots__ = ("bytes", "image_bytes", "image_count", "skipped", "complete")

    def __init__(self):
        self.bytes = 0
        self.image_bytes = 0
        self.image_count = 0
        self.skipped = 0
        self.complete = True

    def add_file(self, size: int, image: bool):
        self.bytes += size
        if image:
            self.image_bytes += size
            self.image_count += 1

    def absorb(self, other: "_Tally"):
        self.bytes += other.bytes
        self.image_bytes += other.image_bytes
        self.image_count += other.image_count
        self.skipped += other.skipped
        self.complete = self.complete and other.complete

    def to_stats(self, file_count: int, folder_count: int) -> DirStats:
        return DirStats(bytes=self.bytes,
                        image_bytes=self.image_bytes,
                        file_count=file_count,
                        folder_count=folder_count,
                        image_count=self.image_count,
                        skipped=self.skipped,
                        complete=self.complete)

TallyFn = Callable[[Sequence[str]], _Tally]

def _tally_files(files: Sequence[str],
                 case_sensitive: bool,
                 follow_symlinks: bool,
                 cancel_flag: Optional[CancelCb]) -> _Tally:
    tally = _Tally()
    for f in files:
        if cancel_flag and cancel_flag():
            tally.complete = False
            break
        try:
            size, image = file_contribution(f, case_sensitive, follow_symlinks)
        except OSError as e:
            # already counted in file_count; contributes no bytes
            log.debug("skipping file %s: %s", f, e)
            tally.skipped += 1
            continue
        tally.add_file(size, image)
    return tally

def _walk(path: str,
          tally: TallyFn,
          follow_symlinks: bool,
          cancel_flag: Optional[CancelCb]) -> DirStats:
    """Depth-first walk over an explicit stack of pending directories.

    Each visited directory yields its own record (immediate files, immediate
    subdirectories) and the records are summed with merge, so the result
    equals the recursive sum while the call depth stays flat however deep
    the tree is. Only a failure to list ``path`` itself is raised.
    """
    total = DirStats()
    pending = [path]
    while pending:
        d = pending.pop()
        if cancel_flag and cancel_flag():
            total = total + DirStats(complete=False)
            continue
        try:
            subdirs, files = list_dir(d, follow_symlinks)
        except OSError as e:
            if d is path:
                raise
            log.debug("skipping directory %s: %s", d, e)
            total = total + DirStats(skipped=1)
            continue
        own = tally(files).to_stats(file_count=len(files), folder_count=len(subdirs))
        total = total + own
        pending.extend(reversed(subdirs))
    return total

def scan_sequential(path: str,
                    *,
                    case_sensitive: bool = False,
                    follow_symlinks: bool = False,
                    cancel_flag: Optional[CancelCb] = None) -> DirStats:
    """Depth-first walk of ``path`` on the calling thread.

    Only a failure to list ``path`` itself is raised; unreadable files and
    subdirectories below it are skipped and counted in ``skipped``.
    """
    def tally(files: Sequence[str]) -> _Tally:
        return _tally_files(files, case_sensitive, follow_symlinks, cancel_flag)

    return _walk(path, tally, follow_symlinks, cancel_flag)

class _LevelTotals:
    """Counters of one directory level shared by its file workers."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tally = _Tally()

    def add(self, partial: _Tally):
        with self._lock:
            self._tally.absorb(partial)

    def result(self) -> _Tally:
        with self._lock:
            return self._tally

class ConcurrentWalk:
    """Fans one directory tree out over two bounded thread pools.

    Files of a directory are stat-ed in chunks on the file pool; every chunk
    sums its files privately and folds the result into the level's counters
    under that level's lock. A subdirectory gets its own task on the
    directory pool while a slot is free. Otherwise its whole subtree is
    walked on the current thread with an explicit stack (its files still go
    to the file pool), so a parent never blocks on a queued child and deep
    trees do not grow the call stack.
    """

    def __init__(self,
                 max_workers: Optional[int] = None,
                 max_dir_tasks: Optional[int] = None,
                 chunk_size: int = DEFAULT_CHUNK_SIZE,
                 case_sensitive: bool = False,
                 follow_symlinks: bool = False,
                 cancel_flag: Optional[CancelCb] = None):
        if max_workers is None:
            max_workers = default_workers()
        if max_dir_tasks is None:
            max_dir_tasks = max_workers
        if max_workers < 1 or max_dir_tasks < 1:
            raise ValueError("worker counts must be >= 1")
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

        self.max_workers = max_workers
        self.max_dir_tasks = max_dir_tasks
        self.chunk_size = chunk_size
        self.case_sensitive = case_sensitive
        self.follow_symlinks = follow_symlinks
        self.cancel_flag = cancel_flag

        self._file_pool = ThreadPoolExecutor(max_workers=max_workers,
                                             thread_name_prefix="disktally-files")
        self._dir_pool = ThreadPoolExecutor(max_workers=max_dir_tasks,
                                            thread_name_prefix="disktally-dirs")
        self._dir_slots = threading.BoundedSemaphore(max_dir_tasks)

    def close(self):
        self._dir_pool.shutdown(wait=True)
        self._file_pool.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _cancelled(self) -> bool:
        return bool(self.cancel_flag and self.cancel_flag())

    def _tally_chunk(self, files: Sequence[str], level: _LevelTotals):
        partial = _tally_files(files, self.case_sensitive, self.follow_symlinks, self.cancel_flag)
        level.add(partial)

    def _submit_files(self, files: Sequence[str], level: _LevelTotals) -> List[Future]:
        return [
            self._file_pool.submit(self._tally_chunk, files[i:i + self.chunk_size], level)
            for i in range(0, len(files), self.chunk_size)
        ]

    def _tally_level(self, files: Sequence[str]) -> _Tally:
        level = _LevelTotals()
        jobs = self._submit_files(files, level)
        wait(jobs)
        for job in jobs:
            job.result()
        return level.result()

    def _walk_inline(self, path: str) -> DirStats:
        try:
            return _walk(path, self._tally_level, self.follow_symlinks, self.cancel_flag)
        except OSError as e:
            log.debug("skipping directory %s: %s", path, e)
            return DirStats(skipped=1)

    def _scan_in_slot(self, path: str) -> DirStats:
        try:
            return self.scan(path)
        except OSError as e:
            log.debug("skipping directory %s: %s", path, e)
            return DirStats(skipped=1)
        finally:
            self._dir_slots.release()

    def scan(self, path: str) -> DirStats:
        if self._cancelled():
            return DirStats(complete=False)

        subdirs, files = list_dir(path, self.follow_symlinks)
        level = _LevelTotals()
        file_jobs = self._submit_files(files, level)

        children: List[DirStats] = []
        dir_jobs: List[Future] = []
        for d in subdirs:
            if self._dir_slots.acquire(blocking=False):
                try:
                    dir_jobs.append(self._dir_pool.submit(self._scan_in_slot, d))
                except BaseException:
                    self._dir_slots.release()
                    raise
            else:
                children.append(self._walk_inline(d))

        # nothing from this level is returned before every job has finished
        wait(file_jobs + dir_jobs)
        for job in file_jobs:
            job.result()
        for job in dir_jobs:
            children.append(job.result())

        own = level.result().to_stats(file_count=len(files), folder_count=len(subdirs))
        return merge([own] + children)

def scan_concurrent(path: str,
                    *,
                    max_workers: Optional[int] = None,
                    max_dir_tasks: Optional[int] = None,
                    chunk_size: int = DEFAULT_CHUNK_SIZE,
                    case_sensitive: bool = False,
                    follow_symlinks: bool = False,
                    cancel_flag: Optional[CancelCb] = None) -> DirStats:
    """Walk ``path`` with sibling files and subdirectories handled in parallel.

    Produces the same record as :func:`scan_sequential` for a static tree.
    """
    with ConcurrentWalk(max_workers=max_workers,
                        max_dir_tasks=max_dir_tasks,
                        chunk_size=chunk_size,
                        case_sensitive=case_sensitive,
                        follow_symlinks=follow_symlinks,
                        cancel_flag=cancel_flag) as walk:
        return walk.scan(path)
