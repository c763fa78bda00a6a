"""
RabbitMQ connection helper shared by the event publisher and the worker
Uses aio-pika for async support
"""

from typing import Optional

import aio_pika
from aio_pika.abc import AbstractChannel, AbstractQueue, AbstractRobustConnection

from blueprint.core.config import Config, config as default_config
from blueprint.core.logger import logger


def items_queue_arguments(settings: Config) -> dict:
    """
    Arguments for the items queue.

    Redelivery and dead-lettering are owned by the broker: a quorum queue
    counts deliveries and routes the message to the dead-letter queue once
    the limit is reached.
    """
    return {
        "x-queue-type": "quorum",
        "x-delivery-limit": settings.max_delivery_count,
        "x-dead-letter-exchange": "",
        "x-dead-letter-routing-key": settings.dead_letter_queue_name,
    }


async def declare_items_queue(channel: AbstractChannel, settings: Config = None) -> AbstractQueue:
    """Declare the dead-letter queue and the items queue (idempotent)"""
    settings = settings or default_config

    await channel.declare_queue(settings.dead_letter_queue_name, durable=True)
    return await channel.declare_queue(
        settings.items_queue_name,
        durable=True,
        arguments=items_queue_arguments(settings),
    )


class RabbitMQBroker:
    """Owns one robust connection and channel to RabbitMQ"""

    def __init__(self, rabbitmq_url: str = None, settings: Config = None):
        self.settings = settings or default_config
        self.rabbitmq_url = rabbitmq_url or self.settings.rabbitmq_url
        self.connection: Optional[AbstractRobustConnection] = None
        self.channel: Optional[AbstractChannel] = None
        self.queue: Optional[AbstractQueue] = None

    async def connect(self, prefetch_count: Optional[int] = None) -> AbstractQueue:
        """Connect, open a channel and declare the items queue"""
        try:
            logger.info("Connecting to RabbitMQ...", metadata={"queue": self.settings.items_queue_name})

            self.connection = await aio_pika.connect_robust(self.rabbitmq_url, heartbeat=600)
            self.channel = await self.connection.channel()

            if prefetch_count:
                await self.channel.set_qos(prefetch_count=prefetch_count)

            self.queue = await declare_items_queue(self.channel, self.settings)

            logger.info(
                "RabbitMQ connected successfully",
                metadata={"event": "broker_connected", "queue": self.settings.items_queue_name}
            )
            return self.queue

        except Exception as e:
            logger.error(f"Failed to connect to RabbitMQ: {e}", metadata={"event": "broker_connection_error"})
            await self.disconnect()
            raise

    async def disconnect(self) -> None:
        """Close channel and connection"""
        if self.channel and not self.channel.is_closed:
            await self.channel.close()
            logger.info("RabbitMQ channel closed")

        if self.connection and not self.connection.is_closed:
            await self.connection.close()
            logger.info("RabbitMQ connection closed")

        self.channel = None
        self.connection = None
        self.queue = None

    def is_healthy(self) -> bool:
        """Check if broker connection is open"""
        return self.connection is not None and not self.connection.is_closed
