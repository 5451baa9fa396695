"""
Password hashing for stored student records using Argon2id.

Passwords are never stored in plain text; the `passwordHash` field of a user
record holds a PHC-format Argon2id string.
"""

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from campusvote.core.logging_config import get_logger

logger = get_logger(__name__)

ph = PasswordHasher(
    time_cost=3,
    memory_cost=65536,  # KiB
    parallelism=4,
    hash_len=32,
    salt_len=16,
    type=Type.ID,
)


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.

    Args:
        password: Plain text password

    Returns:
        Hashed password string in PHC string format
        Example: $argon2id$v=19$m=65536,t=3,p=4$...
    """
    try:
        return ph.hash(password)
    except Exception as e:
        logger.error(f"Password hashing error: {e}")
        raise


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Argon2 hashed password

    Returns:
        True if password matches, False otherwise
    """
    try:
        ph.verify(hashed_password, plain_password)

        if ph.check_needs_rehash(hashed_password):
            logger.info("Password hash needs rehashing with updated parameters")

        return True

    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False
