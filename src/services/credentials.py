"""
Credential hashing for user passwords.

Thin wrapper over werkzeug's password helpers. The user service only ever
stores the token returned by hash_password() and checks logins with
verify_password(); the hashing method comes from configuration
(RECIPE_CATALOG_PASSWORD_HASH_METHOD) unless overridden with
set_hash_method().
"""

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from src.utils.config import get_config

_hash_method: Optional[str] = None


def set_hash_method(method: Optional[str]) -> None:
    """
    Override the hashing method for new hashes.

    Args:
        method: werkzeug method string (e.g. "pbkdf2:sha256:1000"), or None
            to fall back to configuration.
    """
    global _hash_method
    _hash_method = method


def get_hash_method() -> str:
    """Hashing method used for new hashes."""
    if _hash_method is not None:
        return _hash_method
    return get_config().password_hash_method


def hash_password(plaintext: str) -> str:
    """Return a salted one-way hash token for a plaintext password."""
    return generate_password_hash(plaintext, method=get_hash_method())


def verify_password(plaintext: Optional[str], token: Optional[str]) -> bool:
    """
    Check a plaintext password against a stored hash token.

    Returns False for missing input or a token in an unknown format.
    """
    if not plaintext or not token:
        return False
    try:
        return check_password_hash(token, plaintext)
    except ValueError:
        return False
