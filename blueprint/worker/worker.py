"""
Blueprint Worker - Item event consumer
Consumes item events from RabbitMQ and dispatches them by type tag
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import asyncio
import signal
from typing import Optional

from aio_pika.abc import AbstractIncomingMessage

from blueprint.core.config import Config, config as default_config
from blueprint.core.logger import logger
from blueprint.core.telemetry import init_telemetry, instrument_broker
from blueprint.messaging.broker import RabbitMQBroker
from blueprint.worker.handlers.handler_registry import get_handler
from blueprint.worker.processor import ItemEventProcessor


class ItemEventWorker:
    """Worker process for consuming and processing item events"""

    def __init__(
        self,
        broker: Optional[RabbitMQBroker] = None,
        processor: Optional[ItemEventProcessor] = None,
        settings: Config = None,
    ):
        self.settings = settings or default_config
        self.broker = broker or RabbitMQBroker(settings=self.settings)
        self.processor = processor or ItemEventProcessor()
        self.consumer_tag: Optional[str] = None
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()
        self._stopping = False
        self._stop_task: Optional[asyncio.Task] = None
        self._stopped = asyncio.Event()

    async def dispatch(self, event_type: Optional[str], body: bytes, correlation_id: Optional[str] = None) -> bool:
        """
        Deserialize the body into the registered contract and run its handler

        Returns:
            False when no handler is registered for the event type
        """
        handler = get_handler(event_type)
        if handler is None:
            logger.warning(
                f"No handler registered for event type: {event_type}",
                correlation_id=correlation_id,
                metadata={"eventType": event_type}
            )
            return False

        event_cls, method_name = handler
        event = event_cls.model_validate_json(body)
        await getattr(self.processor, method_name)(event)
        return True

    async def handle_message(self, message: AbstractIncomingMessage) -> None:
        """Process one delivery; ack on success, nack with requeue on failure"""
        self._in_flight += 1
        self._idle.clear()
        try:
            await self._process(message)
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()

    async def _process(self, message: AbstractIncomingMessage) -> None:
        event_type = message.type or (message.headers or {}).get("EventType")
        correlation_id = message.correlation_id

        logger.info(
            f"Received message: {event_type}",
            correlation_id=correlation_id,
            metadata={"messageId": message.message_id, "eventType": event_type, "redelivered": message.redelivered}
        )

        try:
            await self.dispatch(event_type, message.body, correlation_id)
            await message.ack()
            logger.info(
                f"Completed message: {event_type}",
                correlation_id=correlation_id,
                metadata={"messageId": message.message_id}
            )
        except Exception as e:
            logger.error(
                f"Error processing message: {event_type}",
                correlation_id=correlation_id,
                metadata={"messageId": message.message_id, "eventType": event_type},
                error=e
            )
            # Broker counts the redelivery and dead-letters past the delivery limit
            await message.nack(requeue=True)

    async def start(self):
        """Connect, start consuming and block until stopped"""
        logger.info("Blueprint Worker starting...")

        queue = await self.broker.connect(prefetch_count=self.settings.worker_max_concurrent_calls)
        self.consumer_tag = await queue.consume(self.handle_message, no_ack=False)

        logger.info(
            f"Worker started, consuming from queue: {self.settings.items_queue_name}",
            metadata={
                "queue": self.settings.items_queue_name,
                "prefetch": self.settings.worker_max_concurrent_calls,
            }
        )
        await self._stopped.wait()

    async def _drain(self):
        """Wait for deliveries already being handled to settle"""
        if self._idle.is_set():
            return

        logger.info(
            f"Waiting for {self._in_flight} in-flight message(s)...",
            metadata={"inFlight": self._in_flight, "timeout": self.settings.worker_shutdown_timeout}
        )
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=self.settings.worker_shutdown_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Shutdown timeout reached with messages still in flight",
                metadata={"inFlight": self._in_flight}
            )

    async def stop(self):
        """Gracefully stop the worker; in-flight messages finish before the broker closes"""
        if self._stopping:
            await self._stopped.wait()
            return
        self._stopping = True

        logger.info("Stopping Blueprint Worker...")
        try:
            if self.consumer_tag and self.broker.queue:
                await self.broker.queue.cancel(self.consumer_tag)
            await self._drain()
            await self.broker.disconnect()
        except Exception as e:
            logger.error(f"Error disconnecting broker: {e}", error=e)
        finally:
            self.consumer_tag = None
            self._stopped.set()

        logger.info("Blueprint Worker stopped")

    def request_stop(self, signum: Optional[int] = None):
        """Signal handler; schedules stop() once"""
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        if self._stop_task is None:
            self._stop_task = asyncio.create_task(self.stop())


async def main():
    """Main entry point for the worker"""
    init_telemetry()
    instrument_broker()

    worker = ItemEventWorker()

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, worker.request_stop, signum)

    try:
        await worker.start()
    except Exception as e:
        logger.error(f"Worker error: {e}", error=e)
        raise
    finally:
        await worker.stop()


def run():
    """Console entry point"""
    asyncio.run(main())


if __name__ == "__main__":
    run()
