"""
JWT issuance and validation via PyJWT.

Access and refresh tokens share one claim shape but are signed with distinct
secrets, so a leaked refresh-signing key cannot mint access tokens and a token
of one kind never validates as the other. The shared jti ties the two tokens
of one login together.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

import jwt

from utils.exceptions import InternalError, InvalidTokenError

ACCESS = "access"
REFRESH = "refresh"

REQUIRED_CLAIMS = ["user_id", "email", "jti", "iat", "exp", "type"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str
    jti: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utcnow,
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("access and refresh secrets must be non-empty")
        if access_secret == refresh_secret:
            raise ValueError("access and refresh secrets must differ")
        self._secrets = {ACCESS: access_secret, REFRESH: refresh_secret}
        self._ttls = {ACCESS: access_ttl, REFRESH: refresh_ttl}
        self._algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_config(cls, config: Dict[str, Any], clock: Callable[[], datetime] = utcnow) -> "TokenIssuer":
        return cls(
            access_secret=config["JWT_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_ttl=timedelta(hours=config["JWT_EXPIRE_HOURS"]),
            refresh_ttl=timedelta(hours=config["JWT_REFRESH_EXPIRE_HOURS"]),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            clock=clock,
        )

    @property
    def refresh_ttl(self) -> timedelta:
        return self._ttls[REFRESH]

    def now(self) -> datetime:
        return self._clock()

    def issue_access(self, user_id: str, email: str, jti: str) -> str:
        return self._issue(ACCESS, user_id, email, jti)

    def issue_refresh(self, user_id: str, email: str, jti: str) -> str:
        return self._issue(REFRESH, user_id, email, jti)

    def validate_access(self, token: str) -> TokenClaims:
        return self._validate(ACCESS, token)

    def validate_refresh(self, token: str) -> TokenClaims:
        return self._validate(REFRESH, token)

    def _issue(self, token_type: str, user_id: str, email: str, jti: str) -> str:
        now = self._clock()
        payload = {
            "user_id": str(user_id),
            "email": email,
            "jti": jti,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttls[token_type]).timestamp()),
            "type": token_type,
        }
        try:
            token = jwt.encode(payload, self._secrets[token_type], algorithm=self._algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as exc:
            raise InternalError(f"Failed to sign {token_type} token") from exc
        if not token:
            raise InternalError(f"Failed to sign {token_type} token")
        return token

    def _validate(self, token_type: str, token: str) -> TokenClaims:
        if not token:
            raise InvalidTokenError("Token is empty")
        # exp is checked below against the injected clock, not wall time
        try:
            decoded = jwt.decode(
                token,
                self._secrets[token_type],
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(f"Invalid token: {exc}") from exc

        if decoded.get("type") != token_type:
            raise InvalidTokenError("Wrong token type")

        try:
            expires_at = datetime.fromtimestamp(int(decoded["exp"]), tz=timezone.utc)
            issued_at = datetime.fromtimestamp(int(decoded["iat"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidTokenError("Invalid token: malformed timestamps") from exc
        if expires_at <= self._clock():
            raise InvalidTokenError("Token expired")

        return TokenClaims(
            user_id=str(decoded["user_id"]),
            email=decoded["email"],
            jti=decoded["jti"],
            issued_at=issued_at,
            expires_at=expires_at,
        )
