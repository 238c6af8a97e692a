"""
Shared utility helpers.

This module contains small, reusable helpers that do not belong
to rule evaluation, the container format or batch orchestration.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Iterator

from .config import CHUNK_SIZE, KNOT_SUFFIX


# ---------------------------------------------------------------------------
# Byte helpers
# ---------------------------------------------------------------------------


def iter_chunks(stream: BinaryIO, size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield successive reads of at most ``size`` bytes until EOF."""
    if size <= 0:
        raise ValueError("chunk size must be positive")

    while True:
        chunk = stream.read(size)
        if not chunk:
            return
        yield chunk


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def knot_path(path: Path) -> Path:
    """Return the container path for ``path`` (``a.txt`` -> ``a.txt.knot``)."""
    return path.with_name(path.name + KNOT_SUFFIX)


def plain_path(path: Path) -> Path:
    """Return ``path`` with its trailing ``.knot`` removed."""
    if not path.name.endswith(KNOT_SUFFIX) or path.name == KNOT_SUFFIX:
        raise ValueError(f"not a {KNOT_SUFFIX} file name: {path}")
    return path.with_name(path.name[: -len(KNOT_SUFFIX)])


def ensure_dir(path: Path) -> None:
    """Ensure a directory exists."""
    path.mkdir(parents=True, exist_ok=True)
