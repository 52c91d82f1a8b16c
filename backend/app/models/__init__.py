"""
Model Package Initialization
============================

Ensures models are registered on the declarative Base when the package is
imported (table creation and Alembic autogenerate both rely on this).

Usage:
    from app.models import Incident
"""

from .incident import Incident

__all__ = [
    "Incident",
]
