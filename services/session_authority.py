"""
Session lifecycle: registration, login, refresh-token rotation and logout.

Each login creates a session identified by a fresh jti shared by its access
token, its refresh token and the refresh token's ledger row:

    [no session] --register/login--> ACTIVE(J1)
    ACTIVE(Jn) --refresh--> ACTIVE(Jn+1), Jn revoked
    ACTIVE(Jn) --logout--> REVOKED(Jn)
    refresh with a revoked/expired/unknown Jn --> rejected, nothing changes

On refresh the old jti is revoked before new tokens are issued. A failure after
that point leaves the user logged out rather than leaving the old refresh token
usable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from marshmallow import ValidationError as SchemaValidationError

from models.schemas.user import UserLoginSchema, UserRegisterSchema
from models.user import User
from repositories.refresh_token_repository import RefreshTokenRepository
from repositories.user_repository import UserRepository
from services.token_issuer import TokenIssuer
from utils.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from utils.security import PasswordHasher, generate_jti

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "invalid email or password"
INVALID_REFRESH_TOKEN = "invalid or expired refresh token"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    jti: str


@dataclass(frozen=True)
class Registration:
    user: User
    tokens: TokenPair


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


class SessionAuthority:
    def __init__(
        self,
        users: UserRepository,
        ledger: RefreshTokenRepository,
        tokens: TokenIssuer,
        hasher: PasswordHasher,
    ):
        self._users = users
        self._ledger = ledger
        self._tokens = tokens
        self._hasher = hasher
        self._register_schema = UserRegisterSchema()
        self._login_schema = UserLoginSchema()
        self._dummy_hash = None

    def register(self, name: str, email: str, password: str) -> Registration:
        data = self._load(self._register_schema, {"name": name, "email": email, "password": password})

        if self._users.email_exists(data["email"]):
            raise ConflictError("Email already exists")

        password_hash = self._hasher.hash(data["password"])
        user = self._users.create(name=data["name"], email=data["email"], password_hash=password_hash)
        logger.info("Registered user %s", user.id)

        return Registration(user=user, tokens=self._start_session(user))

    def login(self, email: str, password: str) -> TokenPair:
        data = self._load(self._login_schema, {"email": email, "password": password})

        user = self._users.get_by_email(data["email"])
        if user is None:
            # same hashing cost as a real mismatch, so timing does not reveal unknown emails
            self._hasher.verify(self._get_dummy_hash(), data["password"])
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not self._hasher.verify(user.password_hash, data["password"]):
            raise AuthenticationError(INVALID_CREDENTIALS)

        return self._start_session(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        try:
            claims = self._tokens.validate_refresh(refresh_token)
        except InvalidTokenError as exc:
            logger.info("Refresh rejected: %s", exc.error)
            raise AuthenticationError(INVALID_REFRESH_TOKEN) from exc

        try:
            stored = self._ledger.find_active_by_jti(claims.jti)
        except NotFoundError as exc:
            logger.warning(
                "Refresh token reuse or revoked session: jti=%s user_id=%s", claims.jti, claims.user_id
            )
            raise AuthenticationError(INVALID_REFRESH_TOKEN) from exc

        if stored.token != refresh_token or stored.user_id != claims.user_id:
            logger.warning("Refresh token mismatch for jti=%s", claims.jti)
            raise AuthenticationError(INVALID_REFRESH_TOKEN)
        if _as_utc(stored.expires_at) <= self._tokens.now():
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        if self._ledger.revoke_by_jti(claims.jti) == 0:
            # another request rotated this token between our read and our update
            logger.warning(
                "Concurrent refresh token reuse: jti=%s user_id=%s", claims.jti, claims.user_id
            )
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        user = self._users.get_by_id(claims.user_id)
        if user is None:
            raise AuthenticationError(INVALID_REFRESH_TOKEN)

        return self._start_session(user)

    def logout(self, jti: str) -> int:
        revoked = self._ledger.revoke_by_jti(jti)
        if revoked:
            logger.info("Session %s logged out", jti)
        else:
            logger.info("Logout for already revoked session %s", jti)
        return revoked

    def logout_everywhere(self, user_id: str) -> int:
        revoked = self._ledger.revoke_all_for_user(user_id)
        logger.info("Revoked %d sessions for user %s", revoked, user_id)
        return revoked

    def _start_session(self, user: User) -> TokenPair:
        jti = generate_jti()
        access_token = self._tokens.issue_access(user.id, user.email, jti)
        refresh_token = self._tokens.issue_refresh(user.id, user.email, jti)
        self._ledger.record(
            user_id=user.id,
            jti=jti,
            token=refresh_token,
            expires_at=self._tokens.now() + self._tokens.refresh_ttl,
        )
        return TokenPair(access_token=access_token, refresh_token=refresh_token, jti=jti)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash(generate_jti())
        return self._dummy_hash

    @staticmethod
    def _load(schema, payload: dict) -> dict:
        try:
            return schema.load(payload)
        except SchemaValidationError as err:
            raise ValidationError("Invalid input", details=err.messages) from err
