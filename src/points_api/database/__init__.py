"""
Database module for the Points API
"""

from .connection import Database, StorageError

__all__ = ["Database", "StorageError"]
