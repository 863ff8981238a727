"""Password hashing and verification using Argon2id."""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from backend.app.config import get_settings


def get_password_hasher() -> PasswordHasher:
    """Get configured Argon2id password hasher."""
    return PasswordHasher(
        time_cost=3,        # 3 iterations
        memory_cost=65536,  # 64 MB memory usage
        parallelism=1,
        hash_len=32,
        salt_len=16,
        encoding="utf-8",
    )


def validate_password(password: str) -> None:
    """Raise ValueError when a password falls outside the accepted length."""
    settings = get_settings()

    if len(password) < settings.password_min_length:
        raise ValueError(
            f"Password must be at least {settings.password_min_length} characters"
        )

    if len(password) > 128:
        raise ValueError("Password must be 128 characters or less")


def hash_password(password: str) -> str:
    """Hash password using Argon2id.

    Raises:
        ValueError: If password is invalid
    """
    validate_password(password)
    return get_password_hasher().hash(password)


def verify_password(password: str, hash_string: str) -> bool:
    """Verify password against Argon2id hash.

    Returns:
        True if password matches hash, False otherwise (including malformed hashes)
    """
    try:
        return get_password_hasher().verify(hash_string, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(hash_string: str) -> bool:
    """Check if password hash was produced with outdated parameters."""
    try:
        return get_password_hasher().check_needs_rehash(hash_string)
    except InvalidHashError:
        return True
