"""
Database package initialization.

The package follows a modular structure:
- base: declarative base and common column mixins
- connection: the explicitly constructed Database store handle
- models: SQLAlchemy ORM models for all entities
"""

__all__ = []
