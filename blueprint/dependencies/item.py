"""
Dependency injection for Item and Category services and repositories
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from blueprint.core.errors import ErrorResponse
from blueprint.db.database import get_session
from blueprint.events.publisher import IEventPublisher
from blueprint.repositories.category import CategoryRepository
from blueprint.repositories.item import ItemRepository
from blueprint.services.category import CategoryService
from blueprint.services.item import ItemService


def get_event_publisher(request: Request) -> IEventPublisher:
    """Publisher created during application startup"""
    publisher = getattr(request.app.state, "event_publisher", None)
    if publisher is None:
        raise ErrorResponse("Event publisher not initialized", status_code=503)
    return publisher


async def get_item_repository(session: AsyncSession = Depends(get_session)) -> ItemRepository:
    """Get item repository instance"""
    return ItemRepository(session)


async def get_item_service(
    repository: ItemRepository = Depends(get_item_repository),
    publisher: IEventPublisher = Depends(get_event_publisher),
) -> ItemService:
    """Get item service instance"""
    return ItemService(repository, publisher)


async def get_category_service(session: AsyncSession = Depends(get_session)) -> CategoryService:
    """Get category service instance"""
    return CategoryService(CategoryRepository(session))
