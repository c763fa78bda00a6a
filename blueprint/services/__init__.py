"""
Services module initialization
"""

from .category import CategoryService
from .item import ItemService

__all__ = ["CategoryService", "ItemService"]
