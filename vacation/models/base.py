"""
Declarative base and shared column helpers
"""
from datetime import datetime, timezone

from vacation.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["Base", "utcnow"]
