"""
Item event publisher

Publishes item events to the items queue on RabbitMQ. Failures are logged and
re-raised; callers decide whether a failed publish matters.
"""

import asyncio
import uuid
from abc import ABC, abstractmethod
from typing import Optional

import aio_pika

from blueprint.core.config import Config, config as default_config
from blueprint.core.context import get_trace_id
from blueprint.core.logger import logger
from blueprint.events.contracts import ItemEvent
from blueprint.messaging.broker import RabbitMQBroker


class IEventPublisher(ABC):
    """Event publisher interface"""

    @abstractmethod
    async def publish(self, event: ItemEvent) -> None:
        """Publish a single event"""

    async def close(self) -> None:
        """Release transport resources"""

    def is_healthy(self) -> bool:
        return True


def build_message(event: ItemEvent) -> aio_pika.Message:
    """Build the broker message for an event"""
    event_type = event.event_type()
    item_id = str(event.item_id)

    headers = {
        "EventType": event_type,
        "ItemId": item_id,
        "UserId": event.user_id,
        "Timestamp": event.timestamp.isoformat(),
    }
    trace_id = get_trace_id()
    if trace_id:
        headers["TraceId"] = trace_id

    return aio_pika.Message(
        body=event.model_dump_json(by_alias=True).encode("utf-8"),
        content_type="application/json",
        message_id=str(uuid.uuid4()),
        correlation_id=item_id,
        type=event_type,
        headers=headers,
        delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
    )


class RabbitMQEventPublisher(IEventPublisher):
    """Publishes events to the items queue, connecting on first use"""

    def __init__(self, broker: Optional[RabbitMQBroker] = None, settings: Config = None):
        self.settings = settings or default_config
        self.broker = broker or RabbitMQBroker(settings=self.settings)
        self._lock = asyncio.Lock()

    async def _ensure_connected(self) -> None:
        async with self._lock:
            if not self.broker.is_healthy():
                await self.broker.connect()

    async def publish(self, event: ItemEvent) -> None:
        event_type = event.event_type()
        try:
            await self._ensure_connected()

            message = build_message(event)
            await self.broker.channel.default_exchange.publish(
                message,
                routing_key=self.settings.items_queue_name,
            )

            logger.info(
                f"Published {event_type} to {self.settings.items_queue_name}",
                correlation_id=message.correlation_id,
                metadata={"event": "event_published", "eventType": event_type, "messageId": message.message_id}
            )

        except Exception as e:
            logger.error(
                f"Failed to publish {event_type}",
                metadata={"event": "event_publish_failed", "eventType": event_type, "itemId": str(event.item_id)},
                error=e
            )
            raise

    async def close(self) -> None:
        await self.broker.disconnect()

    def is_healthy(self) -> bool:
        return self.broker.is_healthy()
