"""
Category repository
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blueprint.core.errors import ErrorResponse
from blueprint.core.logger import logger
from blueprint.models import Category
from blueprint.schemas.category import CategoryResponse


class CategoryRepository:
    """Read access to categories"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List[CategoryResponse]:
        try:
            categories = (await self.session.scalars(select(Category).order_by(Category.name))).all()
            return [CategoryResponse.model_validate(category) for category in categories]

        except SQLAlchemyError as e:
            logger.error(f"Database error listing categories: {e}")
            raise ErrorResponse("Database error during category listing", status_code=503)
