"""
Item service containing business logic layer
"""

import math
from typing import Optional
from uuid import UUID

from blueprint.core.errors import ErrorResponse
from blueprint.core.logger import logger
from blueprint.events.contracts import ItemCreatedEvent, ItemDeletedEvent, ItemEvent, ItemUpdatedEvent
from blueprint.events.publisher import IEventPublisher
from blueprint.models.user import User
from blueprint.repositories.item import ItemRepository, unknown_category_problem
from blueprint.schemas.item import (
    CreateItemRequest,
    ItemDetailsResponse,
    ItemsPageResponse,
    UpdateItemRequest,
)


class ItemService:
    """Service layer for item business logic"""

    def __init__(self, repository: ItemRepository, publisher: IEventPublisher):
        self.repository = repository
        self.publisher = publisher

    async def _publish(self, event: ItemEvent) -> None:
        """Publish without letting a broker failure reach the caller"""
        try:
            await self.publisher.publish(event)
        except Exception as e:
            logger.error(
                f"Failed to publish {event.event_type()} for item {event.item_id}",
                metadata={"event": "item_event_not_published", "item_id": str(event.item_id)},
                error=e
            )

    async def _ensure_category(self, category_id: UUID) -> None:
        if not await self.repository.category_exists(category_id):
            raise unknown_category_problem()

    async def list_items(self, page_number: int, page_size: int, name: Optional[str] = None) -> ItemsPageResponse:
        """Return one page of items ordered by name"""
        items, total = await self.repository.list_page(page_number, page_size, name)

        logger.debug(
            f"Listed {len(items)} of {total} items",
            metadata={"event": "list_items", "page_number": page_number, "page_size": page_size, "name": name}
        )

        return ItemsPageResponse(total_pages=math.ceil(total / page_size), data=items)

    async def get_item(self, item_id: UUID) -> ItemDetailsResponse:
        """Get item by ID"""
        item = await self.repository.get_by_id(item_id)
        if not item:
            raise ErrorResponse("Item not found", status_code=404)

        return item

    async def create_item(self, item_data: CreateItemRequest, user: User) -> ItemDetailsResponse:
        """Create an item and announce it"""
        await self._ensure_category(item_data.category_id)
        item = await self.repository.create(item_data, created_by=user.email)

        logger.info(
            f"Created item {item.name} with price {item.price}",
            metadata={"event": "create_item", "item_id": str(item.id), "user": user.email}
        )

        await self._publish(ItemCreatedEvent(
            item_id=item.id,
            name=item.name,
            category_id=item.category_id,
            price=item.price,
            user_id=user.email,
        ))

        return item

    async def update_item(self, item_id: UUID, item_data: UpdateItemRequest, user: User) -> ItemDetailsResponse:
        """Replace an item's fields and announce the change"""
        await self._ensure_category(item_data.category_id)
        item = await self.repository.update(item_id, item_data, updated_by=user.email)
        if not item:
            raise ErrorResponse("Item not found", status_code=404)

        logger.info(
            f"Updated item {item_id}",
            metadata={"event": "update_item", "item_id": str(item_id), "user": user.email}
        )

        await self._publish(ItemUpdatedEvent(
            item_id=item.id,
            name=item.name,
            category_id=item.category_id,
            price=item.price,
            user_id=user.email,
        ))

        return item

    async def delete_item(self, item_id: UUID, user: User) -> None:
        """Delete an item if present and announce the deletion"""
        deleted = await self.repository.delete(item_id)

        logger.info(
            f"Deleted item {item_id}",
            metadata={"event": "delete_item", "item_id": str(item_id), "rows": deleted, "user": user.email}
        )

        await self._publish(ItemDeletedEvent(item_id=item_id, user_id=user.email))
