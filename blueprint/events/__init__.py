"""
Events module initialization
"""

from .contracts import ItemCreatedEvent, ItemDeletedEvent, ItemEvent, ItemUpdatedEvent
from .publisher import IEventPublisher, RabbitMQEventPublisher, build_message

__all__ = [
    "ItemCreatedEvent",
    "ItemDeletedEvent",
    "ItemEvent",
    "ItemUpdatedEvent",
    "IEventPublisher",
    "RabbitMQEventPublisher",
    "build_message",
]
