#!/usr/bin/env python3
"""
Shared SQLAlchemy base for the Storefront API models.

- Integer autoincrement primary key
- created_at timestamp stored as naive UTC

Notes:
- Timestamps are set on the Python side (utcnow) rather than with
  func.now(), so that SQLite and other backends agree on precision and
  timezone handling when rows are compared against "now" in services.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value: datetime | None) -> str | None:
    """Render a stored naive UTC datetime as ISO 8601 with a Z suffix."""
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds") + "Z"


class BaseModel:
    """
    Base mixin for all persistent models.

    - id, created_at
    - kwargs constructor
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        If you pass created_at explicitly (e.g., in seeds or tests), it is kept.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

