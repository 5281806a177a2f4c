"""
Database Module
"""
from .connection import Database, get_database
from .models import Base

__all__ = [
    "Database",
    "get_database",
    "Base",
]
