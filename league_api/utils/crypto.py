"""Cryptography utilities"""

import hashlib
import secrets

from passlib.context import CryptContext

from league_api.core.config import settings

# Password hashing context with bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt (random per-record salt)

    Args:
        password: Plain text password

    Returns:
        Hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    Verify a password against a hash (constant-time comparison)

    Empty passwords never match, even against a hash of the empty string.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed hash or a password bcrypt refuses
        return False


def digest_token(value: str) -> str:
    """
    Hash a token identifier using SHA-256

    Args:
        value: Token or jti to hash

    Returns:
        Hexadecimal hash string (64 characters)
    """
    return hashlib.sha256(value.encode()).hexdigest()


def generate_uid() -> str:
    """Generate a public client identifier"""
    return secrets.token_urlsafe(32)


def generate_secret(length: int = 32) -> str:
    """
    Generate a cryptographically secure random secret

    Args:
        length: Length of the secret in bytes

    Returns:
        Hexadecimal secret string
    """
    return secrets.token_hex(length)
