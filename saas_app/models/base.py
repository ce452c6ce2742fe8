"""
SQLAlchemy 2.0 async DeclarativeBase for the accounts backend.

All models inherit from this Base.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass
