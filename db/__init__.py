"""
Database package for the competitor tracker.

Provides SQLAlchemy models, session management, and database utilities.
"""

from db.base import Base
from db.session import get_db, engine, session_scope, SessionLocal

__all__ = ["Base", "get_db", "engine", "session_scope", "SessionLocal"]
