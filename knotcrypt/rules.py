"""
Rule evaluation logic.

Given a path and a FilterRules set, this module decides:
- whether a directory is excluded by a skip pattern
- whether a file carries one of the target extensions

Rules DO NOT perform actions. They only return decisions.

Glob patterns are matched with ``search`` semantics: a pattern hits when
it matches anywhere inside the path string, not only the whole path.
That is how existing configurations have always behaved (``build``
also matches ``/src/rebuild``), so it is kept even though an anchored
match is probably what most authors expect.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

from .manifest import FilterRules

_NOT_SEP = r"[^/\\]"


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> "re.Pattern[str]":
    """
    Translate a path glob into a regular expression.

    ``**`` crosses path separators, ``*`` does not, ``?`` is one
    non-separator character. Everything else is literal.
    """

    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append(_NOT_SEP + "*")
            i += 1
        elif pattern[i] == "?":
            parts.append(_NOT_SEP)
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1

    return re.compile("".join(parts))


def matches_wildcard(text: str, pattern: str) -> bool:
    """Return True if ``pattern`` matches anywhere in ``text``."""
    return compile_glob(pattern).search(text) is not None


class RuleEngine:
    def __init__(self, rules: FilterRules):
        self.rules = rules

    def skip_pattern_for(self, path: str | Path) -> Optional[str]:
        """Return the first skip pattern matching ``path``, if any."""
        path_str = str(path)

        for pattern in self.rules.skip_folders:
            if matches_wildcard(path_str, pattern):
                return pattern

        return None

    def matches_extension(self, path: str | Path) -> bool:
        """Exact, case-sensitive comparison of the last suffix."""
        return Path(path).suffix in self.rules.extensions
