"""
Models module initialization
"""

from .base import Base
from .category import Category, DEFAULT_CATEGORIES
from .item import Item
from .user import User

__all__ = [
    "Base",
    "Category",
    "DEFAULT_CATEGORIES",
    "Item",
    "User",
]
