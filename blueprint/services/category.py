"""
Category service
"""

from typing import List

from blueprint.repositories.category import CategoryRepository
from blueprint.schemas.category import CategoryResponse


class CategoryService:
    def __init__(self, repository: CategoryRepository):
        self.repository = repository

    async def list_categories(self) -> List[CategoryResponse]:
        return await self.repository.list_all()
