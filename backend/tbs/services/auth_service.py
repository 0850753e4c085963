"""Login, refresh and logout against the credential and refresh-token stores."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
import logging

from sqlalchemy.orm import Session

from tbs.core.exceptions import TokenInvalidError
from tbs.core.security import normalize_email, utcnow, verify_password
from tbs.models.security import RefreshToken
from tbs.models.user import User
from tbs.services.token_service import TokenService


class AuthFailureReason(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    TOKEN_REVOKED_OR_UNKNOWN = "token_revoked_or_unknown"


@dataclass(frozen=True)
class AuthFailure:
    """Authentication did not succeed; callers answer with a generic 401"""
    reason: AuthFailureReason


@dataclass(frozen=True)
class SessionUser:
    """User record without credentials"""
    id: int
    name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


@dataclass(frozen=True)
class LoginSession:
    access_token: str
    refresh_token: str
    user: SessionUser


@dataclass(frozen=True)
class RefreshedSession:
    access_token: str
    user: SessionUser


LoginResult = Union[LoginSession, AuthFailure]
RotateResult = Union[RefreshedSession, AuthFailure]


class AuthService:
    """Credential check and refresh-token lifecycle"""

    def __init__(self, token_service: TokenService, logger: Optional[logging.Logger] = None) -> None:
        self.tokens = token_service
        self.logger = logger or logging.getLogger(__name__)

    def _fail(self, reason: AuthFailureReason, **fields) -> AuthFailure:
        self.logger.warning("Authentication failed", extra={"reason": reason.value, **fields})
        return AuthFailure(reason)

    def login(self, db: Session, email: str, password: str) -> LoginResult:
        """
        Authenticate by email and password and open a new session

        Unknown email, disabled account and wrong password produce the same
        failure. Each success stores one new refresh token row; sessions on
        other devices are left alone.

        Args:
            db: Database session
            email: Login email (compared lower-cased)
            password: Plain text password

        Returns:
            LoginSession or AuthFailure
        """
        user = db.query(User).filter(User.email == normalize_email(email)).first()
        if not user or not user.is_active:
            return self._fail(AuthFailureReason.INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            return self._fail(AuthFailureReason.INVALID_CREDENTIALS, user_id=user.id)

        access_token = self.tokens.issue_access_token(user)
        refresh_token = self.tokens.issue_refresh_token(user.id)

        db.add(RefreshToken(
            user_id=user.id,
            token_hash=self.tokens.hash_token(refresh_token),
            expires_at=self.tokens.refresh_expiry(),
        ))
        db.commit()

        self.logger.info("User logged in", extra={"user_id": user.id, "role": user.role})
        return LoginSession(
            access_token=access_token,
            refresh_token=refresh_token,
            user=SessionUser.from_user(user),
        )

    def rotate(self, db: Session, raw_refresh_token: Optional[str]) -> RotateResult:
        """
        Exchange a valid refresh token for a fresh access token

        The refresh token itself is not replaced, so repeated or concurrent
        calls with the same unexpired token each receive an access token.
        A stored token found past its expiry is marked revoked.
        """
        try:
            claims = self.tokens.verify_refresh_token(raw_refresh_token)
        except TokenInvalidError:
            return self._fail(AuthFailureReason.INVALID_TOKEN)

        now = utcnow()
        record = (
            db.query(RefreshToken)
            .filter(
                RefreshToken.token_hash == self.tokens.hash_token(raw_refresh_token),
                RefreshToken.revoked_at.is_(None),
            )
            .first()
        )
        if not record:
            return self._fail(AuthFailureReason.TOKEN_REVOKED_OR_UNKNOWN)

        if not record.is_usable(now):
            record.revoked_at = now
            db.commit()
            return self._fail(AuthFailureReason.TOKEN_REVOKED_OR_UNKNOWN, user_id=record.user_id)

        if claims.get("id") != record.user_id:
            return self._fail(AuthFailureReason.INVALID_TOKEN, user_id=record.user_id)

        user = db.query(User).filter(User.id == record.user_id).first()
        if not user or not user.is_active:
            return self._fail(AuthFailureReason.INVALID_CREDENTIALS, user_id=record.user_id)

        self.logger.info("Access token refreshed", extra={"user_id": user.id})
        return RefreshedSession(
            access_token=self.tokens.issue_access_token(user),
            user=SessionUser.from_user(user),
        )

    def logout(self, db: Session, raw_refresh_token: Optional[str]) -> int:
        """
        Revoke the stored refresh token matching ``raw_refresh_token``

        Returns:
            Number of rows revoked (0 when nothing matched or no token given)
        """
        if not raw_refresh_token:
            return 0

        revoked = (
            db.query(RefreshToken)
            .filter(
                RefreshToken.token_hash == self.tokens.hash_token(raw_refresh_token),
                RefreshToken.revoked_at.is_(None),
            )
            .update({RefreshToken.revoked_at: utcnow()}, synchronize_session=False)
        )
        db.commit()

        self.logger.info("Refresh token revoked", extra={"revoked": revoked})
        return revoked
