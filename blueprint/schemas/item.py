"""
API schemas for Item endpoints following FastAPI best practices
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import List
from uuid import UUID

from pydantic import Field, field_validator

from blueprint.models.item import ITEM_DESCRIPTION_MAX_LENGTH, ITEM_NAME_MAX_LENGTH
from blueprint.schemas.base import CamelModel, JsonDecimal


PRICE_QUANTUM = Decimal("0.01")


class ItemRequest(CamelModel):
    """Body shared by item create and update"""
    name: str = Field(..., min_length=1, max_length=ITEM_NAME_MAX_LENGTH)
    category_id: UUID
    price: JsonDecimal = Field(..., ge=1, le=100)
    release_date: date
    description: str = Field(..., min_length=1, max_length=ITEM_DESCRIPTION_MAX_LENGTH)

    @field_validator("price")
    @classmethod
    def round_price(cls, value: Decimal) -> Decimal:
        """Stored as numeric(5,2)"""
        return value.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


class CreateItemRequest(ItemRequest):
    """Schema for creating a new item"""


class UpdateItemRequest(ItemRequest):
    """Schema for replacing an existing item"""


class ItemDetailsResponse(CamelModel):
    """Full item representation"""
    id: UUID
    name: str
    category_id: UUID
    price: JsonDecimal
    release_date: date
    description: str
    last_updated_by: str


class ItemSummaryResponse(CamelModel):
    """Item row in a paged listing"""
    id: UUID
    name: str
    category: str
    price: JsonDecimal
    release_date: date
    last_updated_by: str


class ItemsPageResponse(CamelModel):
    """Response schema for item listing with pagination"""
    total_pages: int
    data: List[ItemSummaryResponse]
