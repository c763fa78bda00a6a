"""
Repositories module initialization
"""

from .category import CategoryRepository
from .item import ItemRepository

__all__ = ["CategoryRepository", "ItemRepository"]
