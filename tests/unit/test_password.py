"""Unit tests for password hashing."""

from authcore.kernel.identity.password import (
    BCRYPT_ROUNDS,
    PasswordHasher,
    hash_password,
    verify_password,
)


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_hash_creates_different_hashes(self, hasher: PasswordHasher):
        """Same password should create different hashes (due to salt)."""
        hash1 = hasher.hash("secret1")
        hash2 = hasher.hash("secret1")

        assert hash1 != hash2
        assert hash1.startswith("$2b$04$")

    def test_hash_is_not_plaintext(self, hasher: PasswordHasher):
        assert "secret1" not in hasher.hash("secret1")

    def test_verify_correct_password(self, hasher: PasswordHasher):
        hashed = hasher.hash("secret1")

        assert hasher.verify("secret1", hashed) is True

    def test_verify_wrong_password(self, hasher: PasswordHasher):
        hashed = hasher.hash("secret1")

        assert hasher.verify("secret2", hashed) is False

    def test_verify_malformed_hash(self, hasher: PasswordHasher):
        """A corrupt stored hash is a mismatch, not an error."""
        assert hasher.verify("secret1", "not-a-bcrypt-hash") is False
        assert hasher.verify("secret1", "") is False

    def test_long_passwords_truncated_consistently(self, hasher: PasswordHasher):
        """bcrypt ignores bytes past 72; hashing must not raise on them."""
        password = "x" * 100
        hashed = hasher.hash(password)

        assert hasher.verify(password, hashed) is True
        assert hasher.verify("x" * 72, hashed) is True

    def test_convenience_functions(self):
        """hash_password uses the default work factor."""
        hashed = hash_password("secret1")

        assert hashed.startswith(f"$2b${BCRYPT_ROUNDS}$")
        assert verify_password("secret1", hashed) is True
        assert verify_password("wrong", hashed) is False
