"""
Password-based key derivation.
"""

from __future__ import annotations

from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2

from .config import KEY_SIZE, PBKDF2_ITERATIONS
from .errors import KeyDerivationError


def derive_key(password: str | bytes, salt: bytes) -> bytes:
    """
    Derive a 32-byte key from ``password`` and ``salt``.

    PBKDF2-HMAC-SHA256, 10 000 iterations. The same inputs always give the
    same key; there is nothing stored that could tell a wrong password
    apart from the right one.

    Raises:
        KeyDerivationError: if the underlying primitive fails
    """

    if isinstance(password, str):
        password = password.encode("utf-8")

    try:
        return PBKDF2(
            password,
            salt,
            dkLen=KEY_SIZE,
            count=PBKDF2_ITERATIONS,
            hmac_hash_module=SHA256,
        )
    except (TypeError, ValueError) as e:
        raise KeyDerivationError(f"PBKDF2 key derivation failed: {e}") from e
