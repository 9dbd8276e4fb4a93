"""Password hashing utilities.

Uses bcrypt for secure password hashing. bcrypt generates a random salt
per hash and embeds it, together with the cost factor, in the output
("$2b$12$<salt><digest>"), so verification needs nothing but the stored
string. The work factor comes from settings.bcrypt_rounds (default 12,
~250ms per hash on modern hardware).
"""

import bcrypt

from teamhub.config import settings


def _encode(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash.

    Malformed or empty hashes never match.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False
