"""
Database Base Definition
========================

Defines the SQLAlchemy Declarative Base.

All ORM models must inherit from this Base.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""
