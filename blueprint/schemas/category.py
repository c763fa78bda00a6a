"""
API schemas for Category endpoints
"""

from uuid import UUID

from blueprint.schemas.base import CamelModel


class CategoryResponse(CamelModel):
    id: UUID
    name: str
