import pytest

from knotcrypt.errors import KeyDerivationError
from knotcrypt.kdf import derive_key


SALT = bytes(range(16))


def test_derive_key_length():
    assert len(derive_key(b"secret", SALT)) == 32


def test_derive_key_is_deterministic():
    assert derive_key(b"secret", SALT) == derive_key(b"secret", SALT)


def test_str_and_bytes_password_agree():
    assert derive_key("pässword", SALT) == derive_key("pässword".encode("utf-8"), SALT)


def test_one_bit_of_salt_changes_key():
    flipped = bytes([SALT[0] ^ 0x01]) + SALT[1:]
    assert derive_key(b"secret", SALT) != derive_key(b"secret", flipped)


def test_different_passwords_differ():
    assert derive_key(b"one", SALT) != derive_key(b"two", SALT)


def test_empty_password_is_allowed():
    assert len(derive_key(b"", SALT)) == 32


def test_bad_input_raises_key_derivation_error():
    with pytest.raises(KeyDerivationError):
        derive_key(b"secret", None)
