"""
knotcrypt

Selects files by extension and folder rules and turns each one into a
self-describing .knot container that can be restored with a password.
"""

__version__ = "1.0.0"

from .config import MAGIC, load_password
from .container import is_container, read_header, write_header
from .errors import ConfigError, DiscoveryError, FormatError, KeyDerivationError, KnotError
from .file_scanner import FileScanner, find_containers
from .kdf import derive_key
from .keystream import KeystreamCipher, transform
from .manifest import FilterRules
from .pipeline import BatchReport, FileOutcome, Status, clean_all, decrypt_all, encrypt_all
from .rules import RuleEngine, compile_glob
from .transformer import Transformer

__all__ = [
    "MAGIC",
    "load_password",
    "is_container",
    "read_header",
    "write_header",
    "KnotError",
    "ConfigError",
    "DiscoveryError",
    "FormatError",
    "KeyDerivationError",
    "FileScanner",
    "find_containers",
    "derive_key",
    "KeystreamCipher",
    "transform",
    "FilterRules",
    "BatchReport",
    "FileOutcome",
    "Status",
    "encrypt_all",
    "decrypt_all",
    "clean_all",
    "RuleEngine",
    "compile_glob",
    "Transformer",
]
