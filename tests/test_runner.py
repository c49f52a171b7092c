"""Tests for traversal orchestration."""

from __future__ import annotations

import os

import pytest

from disktally import runner
from disktally.models import DirStats
from disktally.runner import Mode, check_root, run
from disktally.scanner import CancelFlag


EXPECTED = DirStats(bytes=175, image_bytes=50, file_count=3, folder_count=1, image_count=1)


@pytest.fixture
def root(make_tree):
    return str(make_tree({"big.bin": 100, "pic.png": 50, "sub": {"notes.txt": 25}}))


def test_single_modes(root):
    (seq,) = run(root, Mode.SEQUENTIAL)
    (con,) = run(root, Mode.CONCURRENT, max_workers=2)
    assert (seq.mode, con.mode) == (Mode.SEQUENTIAL, Mode.CONCURRENT)
    assert seq.stats == con.stats == EXPECTED
    assert seq.root == root
    assert seq.elapsed_sec >= 0.0 and con.elapsed_sec >= 0.0


def test_both_runs_concurrent_then_sequential(root):
    results = run(root, Mode.BOTH, max_workers=3, max_dir_tasks=2)
    assert [r.mode for r in results] == [Mode.CONCURRENT, Mode.SEQUENTIAL]
    assert results[0].stats == results[1].stats == EXPECTED
    assert results[0] is not results[1]


def test_sequential_does_not_receive_pool_options(root, monkeypatch):
    seen = {}

    def fake_sequential(path, **opts):
        seen.update(opts)
        return DirStats()

    monkeypatch.setattr(runner, "scan_sequential", fake_sequential)
    run(root, Mode.SEQUENTIAL, max_workers=4, case_sensitive=True)
    assert "max_workers" not in seen and "max_dir_tasks" not in seen
    assert seen["case_sensitive"] is True


def test_cancelled_both_skips_second_pass(root):
    flag = CancelFlag()
    flag.cancel()
    results = run(root, Mode.BOTH, cancel_flag=flag)
    assert len(results) == 1
    assert not results[0].stats.complete


def test_check_root(tmp_path):
    assert check_root(str(tmp_path)) == os.path.abspath(str(tmp_path))
    with pytest.raises(FileNotFoundError):
        check_root(str(tmp_path / "missing"))
    f = tmp_path / "file.txt"
    f.write_text("x")
    with pytest.raises(NotADirectoryError):
        check_root(str(f))


def test_invalid_root_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        run(str(tmp_path / "missing"), Mode.CONCURRENT)
