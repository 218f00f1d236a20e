"""
SQLAlchemy declarative base.

All engine tables inherit from this Base class so that Alembic and the test
fixtures see them through one metadata object.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass
