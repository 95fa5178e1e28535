#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Expense Tracker API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps
- SoftDeleteMixin for models whose rows are hidden rather than removed

Notes:
- We use server-side defaults (func.now()) so timestamps are set consistently by the DB.
- For SQLite, func.now() maps to CURRENT_TIMESTAMP.
- Persistence goes through the repositories, which own the session; models never commit.
- SoftDelete: put mixin FIRST in your model's inheritance list.
  Example:
    class Category(SoftDeleteMixin, BaseModel, Base): ...
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at.
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        DB defaults fill created_at/updated_at on insert unless passed explicitly.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # Ensure an id exists if user passed none
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()


class SoftDeleteMixin:
    """
    Adds a deleted_at timestamp. Repositories filter rows where deleted_at is set.
    IMPORTANT: Place this mixin BEFORE BaseModel in your class base list.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def soft_delete(self):
        """Sets deleted_at; the caller commits."""
        self.deleted_at = datetime.now(timezone.utc)
