"""
SQLAlchemy models for the reference SQL store.
"""

from authcore.kernel.models.user import Base, User

__all__ = [
    "Base",
    "User",
]
