"""Pytest bootstrap for local source imports and synthetic directory trees.

The ``pytest`` console script can run with a sys.path that excludes the
repository root. Ensure ``import disktally`` resolves to the local package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)


def build_tree(root: Path, layout: dict) -> Path:
    """Create ``layout`` under ``root``: int values are file sizes, dicts are subdirectories."""
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        target = root / name
        if isinstance(value, dict):
            build_tree(target, value)
        else:
            target.write_bytes(b"x" * int(value))
    return root


@pytest.fixture
def make_tree(tmp_path):
    def _make(layout: dict, name: str = "root") -> Path:
        return build_tree(tmp_path / name, layout)

    return _make
