#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Contact Form API.

- Integer autoincrement primary key
- created_at / updated_at timestamps stored as naive UTC

Persistence goes through DBStorage (models/db_storage.py); models never
reach for a global session themselves.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time without tzinfo, the form every timestamp column holds."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel:
    """
    Base mixin for all persistent models.

    Timestamps are filled in Python (default/onupdate) so every backend,
    SQLite included, stores the same naive UTC values we compare against.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
