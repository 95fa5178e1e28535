from __future__ import annotations

from dataclasses import dataclass

from services.token_issuer import TokenIssuer
from utils.exceptions import AuthenticationError, InvalidTokenError

BEARER = "Bearer"


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as carried by a valid access token."""

    user_id: str
    email: str
    jti: str


class RequestAuthenticator:
    def __init__(self, tokens: TokenIssuer):
        self._tokens = tokens

    def authenticate(self, header: str | None) -> Identity:
        """Resolve an ``Authorization`` header value to an Identity.

        Only ``Bearer <token>`` with exactly one space is accepted; anything
        else raises AuthenticationError.
        """
        if not header:
            raise AuthenticationError("missing authorization header")

        parts = header.split(" ")
        if len(parts) != 2 or parts[0] != BEARER or not parts[1]:
            raise AuthenticationError("malformed authorization header")

        try:
            claims = self._tokens.validate_access(parts[1])
        except InvalidTokenError as exc:
            raise AuthenticationError(exc.error) from exc

        return Identity(user_id=claims.user_id, email=claims.email, jti=claims.jti)
