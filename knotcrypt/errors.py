"""
Exception taxonomy.

Only ConfigError and DiscoveryError are meant to reach the top level;
the others are caught per file by the pipeline. Plain I/O failures are
left as the builtin OSError.
"""

from __future__ import annotations


class KnotError(Exception):
    """Base class for all knotcrypt errors."""


class ConfigError(KnotError):
    """The filter configuration could not be read or parsed."""


class DiscoveryError(KnotError):
    """The search root is missing or cannot be listed."""


class FormatError(KnotError):
    """A file is not a valid .knot container."""


class KeyDerivationError(KnotError):
    """PBKDF2 failed to produce a key."""
