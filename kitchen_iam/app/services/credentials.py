"""
Password hashing and verification (bcrypt).

bcrypt.checkpw compares digests in constant time, so verification never
short-circuits on an early byte mismatch.
"""

from typing import Optional

import bcrypt

from kitchen_iam.config import ApplicationConfig


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Return a bcrypt hash encoding algorithm, cost, salt and digest."""
    cost = rounds if rounds is not None else ApplicationConfig.BCRYPT_ROUNDS
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(cost)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


_DUMMY_HASH: Optional[str] = None


def verify_dummy_password(password: str) -> None:
    """
    Burn one bcrypt verification for an unknown username.

    Keeps response time for unknown users in line with wrong-password
    attempts so usernames cannot be enumerated by timing.
    """
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_password("kitchen_iam_timing_dummy")
    verify_password(password, _DUMMY_HASH)
