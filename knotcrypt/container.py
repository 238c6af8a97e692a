"""
The .knot container header.

Layout (raw bytes, no integers involved):

    offset  0  len  8   magic  b"KNOTENC1"
    offset  8  len 16   salt
    offset 24  len 16   iv
    offset 40  ...      ciphertext, same length as the plaintext

This module only frames bytes; it knows nothing about keys or files
beyond peeking at a signature.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Tuple

from .config import IV_SIZE, MAGIC, SALT_SIZE
from .errors import FormatError


def write_header(stream: BinaryIO, salt: bytes, iv: bytes) -> None:
    """Write magic, salt and iv. Must come before any ciphertext."""

    if len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be {SALT_SIZE} bytes, got {len(salt)}")
    if len(iv) != IV_SIZE:
        raise ValueError(f"iv must be {IV_SIZE} bytes, got {len(iv)}")

    stream.write(MAGIC)
    stream.write(salt)
    stream.write(iv)


def read_header(stream: BinaryIO) -> Tuple[bytes, bytes]:
    """
    Consume the header and return ``(salt, iv)``.

    The stream is left positioned at the first ciphertext byte.

    Raises:
        FormatError: on a signature mismatch or a short header
    """

    if stream.read(len(MAGIC)) != MAGIC:
        raise FormatError("bad signature")

    salt = stream.read(SALT_SIZE)
    iv = stream.read(IV_SIZE)
    if len(salt) != SALT_SIZE or len(iv) != IV_SIZE:
        raise FormatError("truncated header")

    return salt, iv


def is_container(path: str | Path) -> bool:
    """
    Return True if ``path`` starts with the magic signature.

    Only the first 8 bytes are read. Short, unreadable or missing files
    are simply not containers.
    """

    try:
        with Path(path).open("rb") as fh:
            signature = fh.read(len(MAGIC))
    except OSError:
        return False

    return signature == MAGIC
