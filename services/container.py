"""
Wiring of the store, repositories and services for one application instance.

create_app() builds a ServiceContainer and keeps it on the Flask app; tests
build their own around an isolated DBStorage.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

from models.db_storage import DBStorage
from repositories.category_repository import CategoryRepository
from repositories.expense_repository import ExpenseRepository
from repositories.refresh_token_repository import RefreshTokenRepository
from repositories.user_repository import UserRepository
from services.authenticator import RequestAuthenticator
from services.session_authority import SessionAuthority
from services.token_issuer import TokenIssuer, utcnow
from utils.security import PasswordHasher


@dataclass
class ServiceContainer:
    storage: DBStorage
    users: UserRepository
    refresh_tokens: RefreshTokenRepository
    categories: CategoryRepository
    expenses: ExpenseRepository
    tokens: TokenIssuer
    hasher: PasswordHasher
    sessions: SessionAuthority
    authenticator: RequestAuthenticator

    @classmethod
    def build(cls, storage: DBStorage, config: Mapping[str, Any],
              clock: Callable[[], datetime] = utcnow) -> "ServiceContainer":
        users = UserRepository(storage)
        refresh_tokens = RefreshTokenRepository(storage)
        tokens = TokenIssuer.from_config(config, clock=clock)
        hasher = PasswordHasher(
            time_cost=config.get("PASSWORD_HASH_TIME_COST"),
            memory_cost=config.get("PASSWORD_HASH_MEMORY_COST"),
            parallelism=config.get("PASSWORD_HASH_PARALLELISM"),
        )
        return cls(
            storage=storage,
            users=users,
            refresh_tokens=refresh_tokens,
            categories=CategoryRepository(storage),
            expenses=ExpenseRepository(storage),
            tokens=tokens,
            hasher=hasher,
            sessions=SessionAuthority(users, refresh_tokens, tokens, hasher),
            authenticator=RequestAuthenticator(tokens),
        )
