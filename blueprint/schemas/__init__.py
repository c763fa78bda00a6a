"""
Schemas module initialization
"""

from .category import CategoryResponse
from .item import (
    CreateItemRequest,
    ItemDetailsResponse,
    ItemsPageResponse,
    ItemSummaryResponse,
    UpdateItemRequest,
)

__all__ = [
    "CategoryResponse",
    "CreateItemRequest",
    "ItemDetailsResponse",
    "ItemsPageResponse",
    "ItemSummaryResponse",
    "UpdateItemRequest",
]
