"""
SQLAlchemy declarative base.

This is the foundation for all database models.
All models inherit from this Base class.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All tables inherit from this class so they share one MetaData that
    alembic and the test fixtures can create from.
    """
    pass
