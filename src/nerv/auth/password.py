"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically handles
salting and is resistant to rainbow table attacks. The work factor is
configurable (NERV_BCRYPT_ROUNDS); 12 rounds takes ~100ms per hash on
modern hardware.
"""

import bcrypt

DEFAULT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Learn: bcrypt includes a random salt automatically and produces hashes
    starting with "$2b$". Passwords are truncated to 72 bytes (bcrypt's
    limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash.

    Returns False on any failure, including a malformed stored hash.
    """
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError, AttributeError):
        return False
