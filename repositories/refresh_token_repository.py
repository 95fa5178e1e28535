"""
Refresh-token ledger.

Revocation is a single conditional UPDATE (`WHERE jti = ? AND is_revoked = false`)
committed on its own. Its affected-row count is what decides a race between two
refreshes of the same token: exactly one of them sees 1.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from models.refresh_token import RefreshToken
from utils.exceptions import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class RefreshTokenRepository:
    def __init__(self, storage):
        self._storage = storage

    def record(self, user_id: str, jti: str, token: str, expires_at: datetime) -> RefreshToken:
        rt = RefreshToken(
            user_id=user_id,
            jti=jti,
            token=token,
            expires_at=expires_at,
            is_revoked=False,
        )
        try:
            self._storage.new(rt)
            self._storage.save()
        except SQLAlchemyError as exc:
            logger.error("Failed to record refresh token jti=%s: %s", jti, exc)
            raise PersistenceError("Failed to save refresh token") from exc
        return rt

    def find_active_by_jti(self, jti: str) -> RefreshToken:
        """Return the non-revoked row for jti.

        Revoked and unknown jtis both raise NotFoundError; callers cannot tell
        them apart.
        """
        try:
            rt = (
                self._storage.session.query(RefreshToken)
                .filter(RefreshToken.jti == jti, RefreshToken.is_revoked.is_(False))
                .first()
            )
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to read refresh token") from exc
        if rt is None:
            raise NotFoundError("Refresh token not found")
        return rt

    def revoke_by_jti(self, jti: str) -> int:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.jti == jti, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        return self._revoke(stmt)

    def revoke_all_for_user(self, user_id: str) -> int:
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked.is_(False))
            .values(is_revoked=True)
            .execution_options(synchronize_session=False)
        )
        return self._revoke(stmt)

    def _revoke(self, stmt) -> int:
        session = self._storage.session
        try:
            result = session.execute(stmt)
            self._storage.save()
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to revoke refresh token") from exc
        # rows read before the bulk update may still carry is_revoked=False
        session.expire_all()
        return result.rowcount or 0
