"""
Filesystem scanning and rule application.

This module is responsible for:
- resolving the explicitly listed files
- walking the directory tree with a depth limit and skip patterns
- locating existing .knot containers

This module does NOT:
- encrypt or decrypt data
- modify files
- load the configuration file
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from .config import KNOT_SUFFIX
from .errors import DiscoveryError
from .rules import RuleEngine

ListDir = Callable[[Path], Iterable[Path]]


def _iterdir(path: Path) -> Iterable[Path]:
    return path.iterdir()


class FileScanner:
    def __init__(
        self,
        root: str | Path,
        rule_engine: RuleEngine,
        exclude: Iterable[str | Path] = (),
        list_dir: ListDir = _iterdir,
    ):
        self.root = Path(root).absolute()
        self.rule_engine = rule_engine
        self.exclude = {Path(p).absolute() for p in exclude}
        self.list_dir = list_dir

        # (path, reason) for everything passed over, for the CLI to report
        self.notes: List[Tuple[Path, str]] = []

    def scan(self, max_depth: int = -1) -> List[Path]:
        """
        Return specific files first, then walk results. Nothing is
        de-duplicated: a file listed explicitly and found by the walk
        shows up twice.
        """

        self.notes = []
        return self.specific_targets() + self.walk(max_depth)

    def specific_targets(self) -> List[Path]:
        """Configured specific files that exist as regular files, in order."""

        targets: List[Path] = []
        for name in self.rule_engine.rules.specific_files:
            path = Path(name).absolute()
            if path.is_file():
                targets.append(path)
            else:
                self.notes.append((path, "not a regular file"))

        return targets

    def walk(self, max_depth: int = -1) -> List[Path]:
        """
        Pre-order walk of ``root``.

        ``max_depth`` < 0 means unlimited; the root itself is depth 0, so
        ``max_depth=0`` only looks at the root's own entries.

        Raises:
            DiscoveryError: if the root cannot be listed
        """

        try:
            entries = self._list(self.root)
        except OSError as e:
            raise DiscoveryError(f"Cannot read search root {self.root}: {e}") from e

        found: List[Path] = []
        stack = [(iter(entries), 0)]

        while stack:
            entries_it, depth = stack[-1]
            entry = next(entries_it, None)
            if entry is None:
                stack.pop()
                continue

            if entry in self.exclude:
                continue

            if entry.is_dir():
                pattern = self.rule_engine.skip_pattern_for(entry)
                if pattern is not None:
                    self.notes.append((entry, f"skipped folder (matches {pattern!r})"))
                    continue

                if max_depth >= 0 and depth + 1 > max_depth:
                    continue

                try:
                    children = self._list(entry)
                except OSError as e:
                    self.notes.append((entry, f"unreadable folder ({e.strerror})"))
                    continue

                stack.append((iter(children), depth + 1))

            elif entry.is_file() and self.rule_engine.matches_extension(entry):
                found.append(entry)

        return found

    def _list(self, path: Path) -> List[Path]:
        return list(self.list_dir(path))


def find_containers(root: str | Path) -> List[Path]:
    """
    Find every regular file ending in ``.knot`` under ``root``.

    Unlike :class:`FileScanner` this ignores extensions and skip
    patterns altogether.

    Raises:
        DiscoveryError: if ``root`` is not a directory
    """

    root = Path(root).absolute()
    if not root.is_dir():
        raise DiscoveryError(f"Search root is not a directory: {root}")

    return [
        path
        for path in root.rglob("*" + KNOT_SUFFIX)
        if path.suffix == KNOT_SUFFIX and path.is_file()
    ]


def default_root(cwd: Optional[Path] = None) -> Path:
    """The parent of the working directory, where searches start by default."""
    return (cwd or Path.cwd()).absolute().parent
