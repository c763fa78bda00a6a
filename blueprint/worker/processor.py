"""
Item event processor
Business reactions to item lifecycle events
"""

import asyncio

from blueprint.core.logger import logger
from blueprint.events.contracts import ItemCreatedEvent, ItemDeletedEvent, ItemUpdatedEvent

# Simulated work per event, in seconds
CREATED_WORK_SECONDS = 0.1
UPDATED_WORK_SECONDS = 0.05
DELETED_WORK_SECONDS = 0.03


class ItemEventProcessor:
    """Processes item events received from the items queue"""

    async def process_item_created(self, event: ItemCreatedEvent) -> None:
        item_id = str(event.item_id)
        logger.info(
            f"Processing ItemCreated event for item {item_id}: {event.name}",
            metadata={"eventType": "ItemCreatedEvent", "itemId": item_id}
        )
        try:
            await asyncio.sleep(CREATED_WORK_SECONDS)

            logger.info(
                f"Notification: New item '{event.name}' created with price ${event.price:.2f}",
                metadata={"itemId": item_id, "name": event.name, "price": float(event.price)}
            )
            logger.info(f"Successfully processed ItemCreated event for item {item_id}")
        except Exception as e:
            logger.error(f"Error processing ItemCreated event for item {item_id}", error=e)
            raise

    async def process_item_updated(self, event: ItemUpdatedEvent) -> None:
        item_id = str(event.item_id)
        logger.info(
            f"Processing ItemUpdated event for item {item_id}: {event.name}",
            metadata={"eventType": "ItemUpdatedEvent", "itemId": item_id}
        )
        try:
            await asyncio.sleep(UPDATED_WORK_SECONDS)

            logger.info(
                f"Notification: Item '{event.name}' was updated with new price ${event.price:.2f}",
                metadata={"itemId": item_id, "name": event.name, "price": float(event.price)}
            )
            logger.info(f"Successfully processed ItemUpdated event for item {item_id}")
        except Exception as e:
            logger.error(f"Error processing ItemUpdated event for item {item_id}", error=e)
            raise

    async def process_item_deleted(self, event: ItemDeletedEvent) -> None:
        item_id = str(event.item_id)
        logger.info(
            f"Processing ItemDeleted event for item {item_id}",
            metadata={"eventType": "ItemDeletedEvent", "itemId": item_id}
        )
        try:
            await asyncio.sleep(DELETED_WORK_SECONDS)

            logger.info(f"Notification: Item '{item_id}' has been deleted", metadata={"itemId": item_id})
            logger.info(f"Successfully processed ItemDeleted event for item {item_id}")
        except Exception as e:
            logger.error(f"Error processing ItemDeleted event for item {item_id}", error=e)
            raise
