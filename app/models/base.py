"""
Declarative base for all models.
"""

from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase


def generate_uuid() -> str:
    """Generate string primary key."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all database models."""
