#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Chirpy API.

- created_at / updated_at timestamps, UTC, set by the application so they
  keep sub-second precision on every backend (chirps are ordered by them)
- UUID primary key (String(36)) for entities that are addressed by id
- save() and delete() that use the DBStorage singleton

RefreshToken is keyed by the token string itself, so it only takes
TimestampMixin; everything else uses BaseModel.
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """DateTime stored as UTC and always read back timezone-aware.

    SQLite drops the offset on the way in, so naive results are UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        Timestamps are filled in eagerly so a fresh object can be dumped
        before it is flushed.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        now = utcnow()
        if getattr(self, "created_at", None) is None:
            self.created_at = now
        if getattr(self, "updated_at", None) is None:
            self.updated_at = now

    def save(self):
        """Touch updated_at and commit the instance."""
        self.updated_at = utcnow()
        models.storage.new(self)
        models.storage.save()

    def delete(self):
        """
        Hard delete the current instance. The caller decides when to commit.
        """
        models.storage.delete(self)


class BaseModel(TimestampMixin):
    """Base mixin for entities addressed by a UUID id."""

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Ensure an id exists if none was passed
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()
