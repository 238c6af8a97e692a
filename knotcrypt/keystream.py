"""
XOR keystream cipher.

Every byte is masked with ``key[i % len(key)] ^ iv[i % len(iv)]`` where
``i`` is its absolute position in the file. Running the same transform
twice gives the input back, so one class serves both directions.

There is no authentication: flipped ciphertext bits come out as flipped
plaintext bits.
"""

from __future__ import annotations

import math


def mask_byte(key: bytes, iv: bytes, offset: int) -> int:
    """Return the mask applied to the byte at absolute ``offset``."""
    return key[offset % len(key)] ^ iv[offset % len(iv)]


class KeystreamCipher:
    """
    Stateful keystream positioned at ``offset``.

    Each call to :meth:`apply` continues where the previous one stopped,
    so feeding a file in chunks of any size yields the same bytes as
    feeding it in one piece.
    """

    def __init__(self, key: bytes, iv: bytes, offset: int = 0):
        if not key or not iv:
            raise ValueError("key and iv must be non-empty")
        if offset < 0:
            raise ValueError("offset must be non-negative")

        self.key = bytes(key)
        self.iv = bytes(iv)
        self.offset = offset

        # The mask repeats every lcm(len(key), len(iv)) bytes.
        period = math.lcm(len(self.key), len(self.iv))
        self._pad = bytes(mask_byte(self.key, self.iv, i) for i in range(period))

    def keystream(self, length: int) -> bytes:
        """Return ``length`` mask bytes starting at the current offset."""
        start = self.offset % len(self._pad)
        reps = (start + length) // len(self._pad) + 1
        return (self._pad * reps)[start : start + length]

    def apply(self, chunk: bytes) -> bytes:
        """XOR ``chunk`` with the keystream and advance the offset."""
        length = len(chunk)
        if length == 0:
            return b""

        stream = self.keystream(length)
        out = int.from_bytes(chunk, "big") ^ int.from_bytes(stream, "big")
        self.offset += length
        return out.to_bytes(length, "big")


def transform(data: bytes, key: bytes, iv: bytes, offset: int = 0) -> bytes:
    """One-shot helper around :class:`KeystreamCipher`."""
    return KeystreamCipher(key, iv, offset).apply(data)
