"""Filesystem helpers for tests."""

from __future__ import annotations

import os
from pathlib import Path

# Fixed instants (seconds) so freshness tests never depend on the clock.
T_OLD = 1_600_000_000
T_NEW = 1_700_000_000


def write_at(path: Path, text: str, mtime: int) -> Path:
    """Write ``text`` to ``path`` and pin its modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    os.utime(path, ns=(mtime * 1_000_000_000, mtime * 1_000_000_000))
    return path
