"""Storage layer for users and links."""

from .database import Database, DuplicateError, get_db, init_database

__all__ = ["Database", "DuplicateError", "get_db", "init_database"]
