"""
Content transformation: file <-> .knot container.

This module performs the actual per-file work. It is intentionally
dumb about policy, batching and filesystem traversal.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from Crypto.Random import get_random_bytes

from .config import (
    CHUNK_SIZE,
    IV_SIZE,
    MARKER_REPETITIONS,
    MARKER_TOKEN,
    REFS_DIRNAME,
    SALT_SIZE,
)
from .container import read_header, write_header
from .kdf import derive_key
from .keystream import KeystreamCipher
from .utils import ensure_dir, iter_chunks, knot_path, plain_path


def marker_text() -> str:
    """Body of a marker file: the token on five lines, no final newline."""
    return "\n".join([MARKER_TOKEN] * MARKER_REPETITIONS)


def stream_cipher(
    src: BinaryIO,
    dst: BinaryIO,
    key: bytes,
    iv: bytes,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """Copy ``src`` to ``dst`` through the keystream. Returns bytes written."""

    cipher = KeystreamCipher(key, iv)
    for chunk in iter_chunks(src, chunk_size):
        dst.write(cipher.apply(chunk))
    return cipher.offset


class Transformer:
    def __init__(
        self,
        password: str | bytes,
        refs_dir: str | Path | None = None,
        chunk_size: int = CHUNK_SIZE,
    ):
        self.password = password
        self.refs_dir = Path(refs_dir) if refs_dir is not None else Path.cwd() / REFS_DIRNAME
        self.chunk_size = chunk_size

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encrypt_file(self, path: str | Path) -> Path:
        """
        Write ``<path>.knot`` next to ``path`` and drop a marker in refs.

        The source is left untouched. Salt and IV are fresh for every call.
        """

        path = Path(path).absolute()
        out_path = knot_path(path)

        with path.open("rb") as src:
            with out_path.open("wb") as dst:
                salt = get_random_bytes(SALT_SIZE)
                iv = get_random_bytes(IV_SIZE)
                write_header(dst, salt, iv)

                key = derive_key(self.password, salt)
                stream_cipher(src, dst, key, iv, self.chunk_size)

        self.write_marker(path.name)
        return out_path

    def decrypt_file(self, path: str | Path) -> Path:
        """
        Restore the plaintext sibling of a ``.knot`` container.

        The header is validated before the output file is created, so a
        non-container never leaves anything behind. A wrong password is
        not detected: it just produces garbage.

        Raises:
            FormatError: if ``path`` is not a container
        """

        path = Path(path).absolute()
        out_path = plain_path(path)

        with path.open("rb") as src:
            salt, iv = read_header(src)
            key = derive_key(self.password, salt)

            with out_path.open("wb") as dst:
                stream_cipher(src, dst, key, iv, self.chunk_size)

        return out_path

    def write_marker(self, name: str) -> Path:
        """Create ``refs/<name>``; it carries no cryptographic data."""

        ensure_dir(self.refs_dir)
        marker = self.refs_dir / name
        marker.write_bytes(marker_text().encode("utf-8"))
        return marker
