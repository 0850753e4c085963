"""Security utilities - password hashing, token digests, caller identity"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import hashlib

import bcrypt

from tbs.core.exceptions import TokenInvalidError

DEFAULT_BCRYPT_ROUNDS = 10


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how the database stores datetimes"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored datetimes are naive UTC; offset-aware input is converted"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        bool: True if password matches
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        # Malformed stored hash or a password beyond bcrypt's 72-byte limit
        return False


def get_password_hash(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """
    Hash a password using bcrypt

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        str: Hashed password
    """
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt(rounds=rounds)
    ).decode('utf-8')


def hash_token(raw_token: str) -> str:
    """SHA-256 hex digest used to store and look up refresh tokens"""
    return hashlib.sha256(raw_token.encode('utf-8')).hexdigest()


def normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class Identity:
    """Caller identity decoded from a verified access token"""

    id: int
    role: str
    name: str
    email: str

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Identity":
        try:
            return cls(
                id=int(claims["id"]),
                role=str(claims["role"]),
                name=str(claims["name"]),
                email=str(claims["email"]),
            )
        except (KeyError, TypeError, ValueError):
            raise TokenInvalidError()
