"""Tests for password hashing."""

import bcrypt

from storefront.services.accounts import hash_password


class TestPasswordHashing:
    def test_bcrypt_hash(self):
        encoded = hash_password("secret123", rounds=4)

        assert encoded.startswith("$2b$04$")
        assert bcrypt.checkpw(b"secret123", encoded.encode())
        assert not bcrypt.checkpw(b"wrong", encoded.encode())

    def test_default_rounds(self):
        assert hash_password("secret123").startswith("$2b$12$")

    def test_salted(self):
        """Test the same password hashes differently each time."""
        assert hash_password("secret123", rounds=4) != hash_password("secret123", rounds=4)

    def test_long_password(self):
        """Test passwords past bcrypt's 72-byte limit still hash."""
        password = "é" * 100

        encoded = hash_password(password, rounds=4)

        assert bcrypt.checkpw(password.encode("utf-8")[:72], encoded.encode())
