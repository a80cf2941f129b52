"""Database utilities for Governor.

This module contains:
- Connection pool management
- Store error hierarchy
- Alembic migrations
"""

from governor.db.errors import (
    ConflictError,
    ConnectionError,
    NotFoundError,
    StoreError,
    ValidationError,
)

__all__ = [
    "StoreError",
    "ConnectionError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
]
