"""
Handler Registry - Maps event types to their contract and processor method
"""

from typing import Optional, Tuple, Type

from blueprint.events.contracts import ItemCreatedEvent, ItemDeletedEvent, ItemEvent, ItemUpdatedEvent

# Registry keyed by the message type tag (the event class name)
HANDLERS = {
    ItemCreatedEvent.event_type(): (ItemCreatedEvent, "process_item_created"),
    ItemUpdatedEvent.event_type(): (ItemUpdatedEvent, "process_item_updated"),
    ItemDeletedEvent.event_type(): (ItemDeletedEvent, "process_item_deleted"),
}


def get_handler(event_type: Optional[str]) -> Optional[Tuple[Type[ItemEvent], str]]:
    """
    Get the contract class and processor method name for an event type

    Args:
        event_type: The message type tag

    Returns:
        (event class, method name) or None if no handler registered
    """
    if not event_type:
        return None
    return HANDLERS.get(event_type)
