"""Base model for the pgCompare repository tables.

The repository schema is created and owned by pgCompare itself; these
models only map onto it. Tables are unqualified and resolve through the
session's ``search_path``.
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
