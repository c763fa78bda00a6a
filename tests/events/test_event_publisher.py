"""Unit tests for item event contracts and the RabbitMQ publisher"""
import json
import uuid
from decimal import Decimal

import aio_pika
import pytest
from pydantic import ValidationError
from unittest.mock import AsyncMock, MagicMock

from blueprint.core.context import set_trace_id, trace_id_ctx
from blueprint.events.contracts import ItemCreatedEvent, ItemDeletedEvent
from blueprint.events.publisher import RabbitMQEventPublisher, build_message


@pytest.fixture
def created_event():
    return ItemCreatedEvent(
        item_id=uuid.uuid4(),
        name="Phoenix Down",
        category_id=uuid.uuid4(),
        price=Decimal("9.99"),
        user_id="owner@example.com",
    )


@pytest.fixture
def mock_broker():
    broker = MagicMock()
    broker.is_healthy.return_value = True
    broker.connect = AsyncMock()
    broker.disconnect = AsyncMock()
    broker.channel.default_exchange.publish = AsyncMock()
    return broker


class TestEventContracts:
    """Wire format of the item events"""

    def test_body_uses_camel_case(self, created_event):
        body = json.loads(created_event.model_dump_json(by_alias=True))

        assert set(body) == {"itemId", "name", "categoryId", "price", "userId", "timestamp"}
        assert body["price"] == 9.99

    def test_round_trip_from_wire_json(self, created_event):
        parsed = ItemCreatedEvent.model_validate_json(created_event.model_dump_json(by_alias=True))

        assert parsed == created_event

    def test_events_are_immutable(self, created_event):
        with pytest.raises(ValidationError):
            created_event.name = "Changed"

    def test_timestamp_is_utc(self):
        event = ItemDeletedEvent(item_id=uuid.uuid4(), user_id="u@example.com")

        assert event.timestamp.utcoffset().total_seconds() == 0


class TestBuildMessage:
    def test_message_properties(self, created_event):
        message = build_message(created_event)

        assert message.type == "ItemCreatedEvent"
        assert message.content_type == "application/json"
        assert message.correlation_id == str(created_event.item_id)
        assert uuid.UUID(message.message_id)
        assert message.delivery_mode == aio_pika.DeliveryMode.PERSISTENT
        assert message.headers["EventType"] == "ItemCreatedEvent"
        assert message.headers["ItemId"] == str(created_event.item_id)
        assert message.headers["UserId"] == "owner@example.com"
        assert message.headers["Timestamp"] == created_event.timestamp.isoformat()
        assert json.loads(message.body)["itemId"] == str(created_event.item_id)

    def test_message_ids_are_unique(self, created_event):
        assert build_message(created_event).message_id != build_message(created_event).message_id

    def test_trace_id_is_attached_when_present(self, created_event):
        token = trace_id_ctx.set(None)
        try:
            assert "TraceId" not in build_message(created_event).headers

            set_trace_id("4bf92f3577b34da6a3ce929d0e0e4736")
            assert build_message(created_event).headers["TraceId"] == "4bf92f3577b34da6a3ce929d0e0e4736"
        finally:
            trace_id_ctx.reset(token)


class TestRabbitMQEventPublisher:
    @pytest.mark.asyncio
    async def test_publish_sends_to_items_queue(self, created_event, mock_broker):
        publisher = RabbitMQEventPublisher(broker=mock_broker)

        await publisher.publish(created_event)

        publish = mock_broker.channel.default_exchange.publish
        publish.assert_awaited_once()
        message = publish.await_args.args[0]
        assert publish.await_args.kwargs["routing_key"] == "items-events"
        assert message.type == "ItemCreatedEvent"
        mock_broker.connect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_connects_on_first_use(self, created_event, mock_broker):
        mock_broker.is_healthy.return_value = False
        publisher = RabbitMQEventPublisher(broker=mock_broker)

        await publisher.publish(created_event)

        mock_broker.connect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_publish_failure_is_raised(self, created_event, mock_broker):
        mock_broker.channel.default_exchange.publish.side_effect = ConnectionError("channel closed")
        publisher = RabbitMQEventPublisher(broker=mock_broker)

        with pytest.raises(ConnectionError):
            await publisher.publish(created_event)

    @pytest.mark.asyncio
    async def test_close_disconnects_broker(self, mock_broker):
        publisher = RabbitMQEventPublisher(broker=mock_broker)

        await publisher.close()

        mock_broker.disconnect.assert_awaited_once()
