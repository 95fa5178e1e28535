from __future__ import annotations

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.user import User
from utils.exceptions import ConflictError, PersistenceError


class UserRepository:
    def __init__(self, storage):
        self._storage = storage

    def create(self, name: str, email: str, password_hash: str) -> User:
        user = User(name=name, email=email, password_hash=password_hash)
        try:
            self._storage.new(user)
            self._storage.save()
        except IntegrityError as exc:
            # lost a race with a concurrent registration of the same email
            raise ConflictError("Email already exists") from exc
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to create user") from exc
        return user

    def get_by_email(self, email: str) -> User | None:
        try:
            return self._storage.session.query(User).filter(User.email == email).first()
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to read user") from exc

    def get_by_id(self, user_id: str) -> User | None:
        try:
            return self._storage.get(User, user_id)
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to read user") from exc

    def email_exists(self, email: str) -> bool:
        session = self._storage.session
        try:
            return session.query(session.query(User).filter(User.email == email).exists()).scalar()
        except SQLAlchemyError as exc:
            self._storage.rollback()
            raise PersistenceError("Failed to read user") from exc
