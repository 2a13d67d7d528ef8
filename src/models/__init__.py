"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .category import Category
from .enums import DifficultyLevel
from .recipe import Recipe
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "Category",
    "DifficultyLevel",
    "Recipe",
    "User",
]
