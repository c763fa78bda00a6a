"""
Item repository for data access layer following Repository pattern
"""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from blueprint.core.errors import ErrorResponse, ValidationProblem
from blueprint.core.logger import logger
from blueprint.models import Category, Item
from blueprint.schemas.item import ItemDetailsResponse, ItemRequest, ItemSummaryResponse


UNKNOWN_CATEGORY_MESSAGE = "Category does not exist"


def unknown_category_problem() -> ValidationProblem:
    return ValidationProblem({"categoryId": [UNKNOWN_CATEGORY_MESSAGE]})


class ItemRepository:
    """Repository for item data access operations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _to_details(item: Item) -> ItemDetailsResponse:
        return ItemDetailsResponse.model_validate(item)

    @staticmethod
    def _to_summary(item: Item) -> ItemSummaryResponse:
        return ItemSummaryResponse(
            id=item.id,
            name=item.name,
            category=item.category.name if item.category else "",
            price=item.price,
            release_date=item.release_date,
            last_updated_by=item.last_updated_by,
        )

    async def create(self, item_data: ItemRequest, created_by: str) -> ItemDetailsResponse:
        """Insert a new item"""
        try:
            item = Item(**item_data.model_dump(), last_updated_by=created_by)
            self.session.add(item)
            await self.session.commit()
            return self._to_details(item)

        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Item rejected by database constraint: {e}")
            raise unknown_category_problem()

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Database error creating item: {e}")
            raise ErrorResponse("Database error during item creation", status_code=503)

    async def category_exists(self, category_id: UUID) -> bool:
        """Check that an item may reference the category"""
        try:
            return await self.session.get(Category, category_id) is not None

        except SQLAlchemyError as e:
            logger.error(f"Database error getting category: {e}")
            raise ErrorResponse("Database error during category lookup", status_code=503)

    async def get_by_id(self, item_id: UUID) -> Optional[ItemDetailsResponse]:
        """Get item by ID"""
        try:
            item = await self.session.get(Item, item_id)
            return self._to_details(item) if item else None

        except SQLAlchemyError as e:
            logger.error(f"Database error getting item: {e}")
            raise ErrorResponse("Database error during item retrieval", status_code=503)

    async def update(self, item_id: UUID, item_data: ItemRequest, updated_by: str) -> Optional[ItemDetailsResponse]:
        """Overwrite every mutable field; None when the item does not exist"""
        try:
            item = await self.session.get(Item, item_id)
            if item is None:
                return None

            for field, value in item_data.model_dump().items():
                setattr(item, field, value)
            item.last_updated_by = updated_by

            await self.session.commit()
            return self._to_details(item)

        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Item rejected by database constraint: {e}")
            raise unknown_category_problem()

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Database error updating item: {e}")
            raise ErrorResponse("Database error during item update", status_code=503)

    async def delete(self, item_id: UUID) -> int:
        """Delete by ID, returning the number of rows removed"""
        try:
            result = await self.session.execute(delete(Item).where(Item.id == item_id))
            await self.session.commit()
            return result.rowcount or 0

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Database error deleting item: {e}")
            raise ErrorResponse("Database error during item deletion", status_code=503)

    async def list_page(
        self,
        page_number: int,
        page_size: int,
        name: Optional[str] = None,
    ) -> Tuple[List[ItemSummaryResponse], int]:
        """Return one page of items ordered by name together with the total match count"""
        try:
            filters = []
            if name and name.strip():
                filters.append(Item.name.icontains(name, autoescape=True))

            total = await self.session.scalar(
                select(func.count()).select_from(Item).where(*filters)
            )

            query = (
                select(Item)
                .options(joinedload(Item.category))
                .where(*filters)
                .order_by(Item.name)
                .offset((page_number - 1) * page_size)
                .limit(page_size)
            )
            items = (await self.session.scalars(query)).all()

            return [self._to_summary(item) for item in items], total or 0

        except SQLAlchemyError as e:
            logger.error(f"Database error listing items: {e}")
            raise ErrorResponse("Database error during item listing", status_code=503)
