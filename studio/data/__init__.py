"""
Demo Data Module
"""
from .seed import StudioDataGenerator, seed_database

__all__ = [
    "StudioDataGenerator",
    "seed_database",
]
