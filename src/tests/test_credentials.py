"""Tests for password hashing."""

from src.services import credentials


class TestCredentials:
    """Tests for hash_password() and verify_password()."""

    def test_hash_and_verify(self):
        token = credentials.hash_password("secret123")
        assert token != "secret123"
        assert credentials.verify_password("secret123", token) is True
        assert credentials.verify_password("secret124", token) is False

    def test_hashes_are_salted(self):
        assert credentials.hash_password("secret123") != credentials.hash_password("secret123")

    def test_uses_selected_method(self):
        credentials.set_hash_method("pbkdf2:sha256:1000")
        assert credentials.get_hash_method() == "pbkdf2:sha256:1000"
        assert credentials.hash_password("secret123").startswith("pbkdf2:sha256:1000$")

    def test_missing_input_fails(self):
        token = credentials.hash_password("secret123")
        assert credentials.verify_password("", token) is False
        assert credentials.verify_password(None, token) is False
        assert credentials.verify_password("secret123", None) is False

    def test_unknown_token_format_fails(self):
        assert credentials.verify_password("secret123", "not-a-hash") is False
