"""Access and refresh token issuance and verification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import secrets

from jose import JWTError, jwt

from tbs.config import Settings
from tbs.core.exceptions import TokenInvalidError
from tbs.core.security import hash_token, utcnow

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenSettings:
    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl_minutes: int = 15
    refresh_ttl_days: int = 7

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSettings":
        return cls(
            access_secret=settings.JWT_ACCESS_SECRET,
            refresh_secret=settings.JWT_REFRESH_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            access_ttl_minutes=settings.ACCESS_TTL_MIN,
            refresh_ttl_days=settings.REFRESH_TTL_DAYS,
        )


class TokenService:
    """Mint and validate the two token kinds; owns the secrets and TTL policy."""

    def __init__(self, config: TokenSettings) -> None:
        self._config = config

    @property
    def access_ttl(self) -> timedelta:
        return timedelta(minutes=self._config.access_ttl_minutes)

    @property
    def refresh_ttl(self) -> timedelta:
        return timedelta(days=self._config.refresh_ttl_days)

    def _encode(
        self,
        claims: Dict[str, Any],
        *,
        token_type: str,
        secret: str,
        expires_delta: timedelta,
    ) -> str:
        now = datetime.now(timezone.utc)
        to_encode = dict(claims)
        to_encode.update({
            "typ": token_type,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_delta).timestamp()),
            "jti": secrets.token_urlsafe(16),  # keeps same-second tokens distinct
        })
        return jwt.encode(to_encode, secret, algorithm=self._config.algorithm)

    def _decode(self, token: str, *, token_type: str, secret: str) -> Dict[str, Any]:
        if not token or not isinstance(token, str):
            raise TokenInvalidError()
        try:
            payload = jwt.decode(token, secret, algorithms=[self._config.algorithm])
        except JWTError:
            raise TokenInvalidError()
        if payload.get("typ") != token_type or "id" not in payload:
            raise TokenInvalidError()
        return payload

    def issue_access_token(self, user: Any, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed access token for a user

        Args:
            user: Object exposing id, role, name and email
            expires_delta: Override of the configured access TTL

        Returns:
            str: Encoded JWT
        """
        claims = {
            "id": user.id,
            "role": user.role,
            "name": user.name,
            "email": user.email,
        }
        return self._encode(
            claims,
            token_type=ACCESS_TOKEN_TYPE,
            secret=self._config.access_secret,
            expires_delta=expires_delta or self.access_ttl,
        )

    def issue_refresh_token(self, user_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed refresh token; the caller persists its hash."""
        return self._encode(
            {"id": user_id},
            token_type=REFRESH_TOKEN_TYPE,
            secret=self._config.refresh_secret,
            expires_delta=expires_delta or self.refresh_ttl,
        )

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature, expiry and token type of an access token

        Raises:
            TokenInvalidError: On any failure
        """
        return self._decode(token, token_type=ACCESS_TOKEN_TYPE, secret=self._config.access_secret)

    def verify_refresh_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature, expiry and token type of a refresh token

        Raises:
            TokenInvalidError: On any failure
        """
        return self._decode(token, token_type=REFRESH_TOKEN_TYPE, secret=self._config.refresh_secret)

    @staticmethod
    def hash_token(raw_token: str) -> str:
        return hash_token(raw_token)

    def refresh_expiry(self, now: Optional[datetime] = None) -> datetime:
        """Storage expiry for a refresh token minted at ``now`` (naive UTC)"""
        return (now or utcnow()) + self.refresh_ttl
