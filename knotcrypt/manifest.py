"""
Filter configuration loading and normalization.

This module answers one question:
    "Which files does the user want encrypted?"

Responsibilities:
- Load the configuration document (config.json)
- Normalize missing or oddly shaped fields
- Expose a clean, read-only Python representation

This module does NOT:
- Match files
- Encrypt anything
- Walk the filesystem
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FilterRules:
    extensions: Tuple[str, ...] = field(default_factory=tuple)
    specific_files: Tuple[str, ...] = field(default_factory=tuple)
    skip_folders: Tuple[str, ...] = field(default_factory=tuple)

    # ------------------------------------------------------------------
    # Loading API
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: str | Path) -> "FilterRules":
        """
        Load and normalize a configuration file.

        The document is parsed with a YAML loader; plain JSON is valid
        YAML, so the usual config.json works unchanged.

        Args:
            path: Path to the configuration file

        Raises:
            ConfigError: if the file is unreadable, malformed, or not a mapping

        Returns:
            FilterRules
        """

        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh)
        except OSError as e:
            raise ConfigError(f"Unable to open config file: {path} ({e.strerror})") from e
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise ConfigError(f"Malformed config file: {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(f"Invalid format in config file: {path}")

        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterRules":
        return cls(
            extensions=cls._string_list(data.get("extensions")),
            specific_files=cls._string_list(data.get("specific_files")),
            skip_folders=cls._string_list(data.get("skip_folders")),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _string_list(value: Any) -> Tuple[str, ...]:
        # Anything that is not a list counts as empty; non-string items are dropped.
        if not isinstance(value, list):
            return ()
        return tuple(item for item in value if isinstance(item, str))
