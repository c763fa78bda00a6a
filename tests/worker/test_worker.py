"""Unit tests for the item event worker"""
import asyncio
import uuid
from decimal import Decimal

import pytest
from unittest.mock import AsyncMock, MagicMock

from blueprint.core.config import Config
from blueprint.events.contracts import ItemCreatedEvent, ItemDeletedEvent, ItemUpdatedEvent
from blueprint.events.publisher import build_message
from blueprint.worker.handlers.handler_registry import HANDLERS, get_handler
from blueprint.worker.processor import ItemEventProcessor
from blueprint.worker.worker import ItemEventWorker


def _incoming(event=None, body=None, message_type=None):
    """Incoming message double built from a real outgoing message"""
    message = MagicMock()
    if event is not None:
        outgoing = build_message(event)
        message.type = outgoing.type
        message.body = outgoing.body
        message.correlation_id = outgoing.correlation_id
        message.message_id = outgoing.message_id
        message.headers = outgoing.headers
    else:
        message.type = message_type
        message.body = body or b"{}"
        message.correlation_id = None
        message.message_id = str(uuid.uuid4())
        message.headers = {}
    message.redelivered = False
    message.ack = AsyncMock()
    message.nack = AsyncMock()
    return message


@pytest.fixture
def processor():
    return AsyncMock(spec=ItemEventProcessor)


@pytest.fixture
def broker():
    broker = MagicMock()
    broker.connect = AsyncMock()
    broker.disconnect = AsyncMock()
    return broker


@pytest.fixture
def worker(broker, processor):
    return ItemEventWorker(broker=broker, processor=processor, settings=Config(worker_max_concurrent_calls=5))


class TestHandlerRegistry:
    def test_registry_covers_every_item_event(self):
        assert set(HANDLERS) == {"ItemCreatedEvent", "ItemUpdatedEvent", "ItemDeletedEvent"}

    def test_unknown_or_missing_type(self):
        assert get_handler("SomethingElse") is None
        assert get_handler(None) is None


class TestHandleMessage:
    """Dispatch and settlement of deliveries"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("event,method", [
        (ItemCreatedEvent(item_id=uuid.uuid4(), name="Tent", category_id=uuid.uuid4(), price=Decimal("3"), user_id="u@example.com"), "process_item_created"),
        (ItemUpdatedEvent(item_id=uuid.uuid4(), name="Tent", category_id=uuid.uuid4(), price=Decimal("4"), user_id="u@example.com"), "process_item_updated"),
        (ItemDeletedEvent(item_id=uuid.uuid4(), user_id="u@example.com"), "process_item_deleted"),
    ])
    async def test_dispatches_by_type_and_acks(self, worker, processor, event, method):
        # Arrange
        message = _incoming(event)

        # Act
        await worker.handle_message(message)

        # Assert
        handler = getattr(processor, method)
        handler.assert_awaited_once()
        assert handler.await_args.args[0] == event
        message.ack.assert_awaited_once()
        message.nack.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_type_is_acknowledged(self, worker, processor):
        message = _incoming(message_type="InventoryChangedEvent")

        await worker.handle_message(message)

        message.ack.assert_awaited_once()
        processor.process_item_created.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_type_falls_back_to_event_type_header(self, worker, processor):
        event = ItemDeletedEvent(item_id=uuid.uuid4(), user_id="u@example.com")
        message = _incoming(event)
        message.type = None

        await worker.handle_message(message)

        processor.process_item_deleted.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_handler_failure_is_requeued(self, worker, processor):
        processor.process_item_deleted.side_effect = RuntimeError("downstream unavailable")
        message = _incoming(ItemDeletedEvent(item_id=uuid.uuid4(), user_id="u@example.com"))

        await worker.handle_message(message)

        message.nack.assert_awaited_once_with(requeue=True)
        message.ack.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_body_is_requeued(self, worker):
        message = _incoming(body=b"not json", message_type="ItemCreatedEvent")

        await worker.handle_message(message)

        message.nack.assert_awaited_once_with(requeue=True)


class TestWorkerLifecycle:
    @pytest.mark.asyncio
    async def test_start_consumes_with_prefetch_until_stopped(self, worker, broker):
        queue = MagicMock()
        queue.consume = AsyncMock(return_value="ctag-1")
        queue.cancel = AsyncMock()
        broker.connect.return_value = queue
        broker.queue = queue

        async def stop_when_consuming(*args, **kwargs):
            await worker.stop()
            return "ctag-1"

        queue.consume.side_effect = stop_when_consuming

        await worker.start()

        broker.connect.assert_awaited_once_with(prefetch_count=5)
        assert queue.consume.await_args.kwargs["no_ack"] is False
        broker.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self, worker, broker):
        await worker.stop()
        await worker.stop()

        broker.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_waits_for_in_flight_message_before_disconnecting(self, worker, broker, processor):
        """The ack of a message being handled lands before the channel closes"""
        # Arrange
        order = []

        async def slow_delete(event):
            await asyncio.sleep(0.2)

        processor.process_item_deleted.side_effect = slow_delete
        message = _incoming(ItemDeletedEvent(item_id=uuid.uuid4(), user_id="u@example.com"))
        message.ack.side_effect = lambda: order.append("ack")
        broker.disconnect.side_effect = lambda: order.append("disconnect")

        # Act
        handling = asyncio.create_task(worker.handle_message(message))
        await asyncio.sleep(0.01)
        await worker.stop()
        await handling

        # Assert
        assert order == ["ack", "disconnect"]

    @pytest.mark.asyncio
    async def test_stop_gives_up_waiting_after_shutdown_timeout(self, broker, processor):
        # Arrange
        worker = ItemEventWorker(broker=broker, processor=processor, settings=Config(worker_shutdown_timeout=0.05))
        release = asyncio.Event()

        async def blocked_delete(event):
            await release.wait()

        processor.process_item_deleted.side_effect = blocked_delete
        message = _incoming(ItemDeletedEvent(item_id=uuid.uuid4(), user_id="u@example.com"))
        handling = asyncio.create_task(worker.handle_message(message))
        await asyncio.sleep(0.01)

        # Act
        await worker.stop()

        # Assert
        broker.disconnect.assert_awaited_once()
        message.ack.assert_not_awaited()

        release.set()
        await handling

    @pytest.mark.asyncio
    async def test_request_stop_schedules_a_single_stop(self, worker, broker):
        worker.request_stop(15)
        worker.request_stop(2)

        await worker._stop_task

        broker.disconnect.assert_awaited_once()
