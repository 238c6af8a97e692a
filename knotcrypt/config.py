"""
Global configuration and environment handling.

This module is responsible for:
- Defining the on-disk format constants and tool defaults
- Loading the password from the environment or the terminal

Nothing in this file should depend on:
- the filesystem layout being scanned
- the filter configuration
- CLI arguments

If something here changes, every existing .knot container may become
unreadable.
"""

from __future__ import annotations

import os
import getpass
from typing import Final

# ---------------------------------------------------------------------------
# Tool / format versioning
# ---------------------------------------------------------------------------

TOOL_VERSION: Final[str] = "1.0.0"

MAGIC: Final[bytes] = b"KNOTENC1"
SALT_SIZE: Final[int] = 16
KEY_SIZE: Final[int] = 32  # 256 bits
IV_SIZE: Final[int] = 16
HEADER_SIZE: Final[int] = len(MAGIC) + SALT_SIZE + IV_SIZE

PBKDF2_ITERATIONS: Final[int] = 10_000

# ---------------------------------------------------------------------------
# Default behavior
# ---------------------------------------------------------------------------

CHUNK_SIZE: Final[int] = 1024
KNOT_SUFFIX: Final[str] = ".knot"
DEFAULT_CONFIG_FILE: Final[str] = "config.json"

REFS_DIRNAME: Final[str] = "refs"
MARKER_TOKEN: Final[str] = "reference"
MARKER_REPETITIONS: Final[int] = 5

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_PASSWORD: Final[str] = "KNOT_PASSWORD"

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_password(prompt: str = "Enter password: ") -> str:
    """
    Return the password for this run.

    ``KNOT_PASSWORD`` wins when set (even to an empty string), otherwise
    the user is prompted once without echo.
    """

    raw = os.getenv(ENV_PASSWORD)
    if raw is not None:
        return raw

    return getpass.getpass(prompt)
