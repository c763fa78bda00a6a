"""
Item event contracts shared by the API and the worker

Events travel as camelCase JSON; the class name doubles as the message type tag.
"""

from datetime import datetime, timezone
from uuid import UUID

from pydantic import ConfigDict, Field

from blueprint.schemas.base import CamelModel, JsonDecimal


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ItemEvent(CamelModel):
    """Base for item lifecycle events"""

    model_config = ConfigDict(frozen=True)

    item_id: UUID
    user_id: str
    timestamp: datetime = Field(default_factory=_utc_now)

    @classmethod
    def event_type(cls) -> str:
        return cls.__name__


class ItemCreatedEvent(ItemEvent):
    name: str
    category_id: UUID
    price: JsonDecimal


class ItemUpdatedEvent(ItemEvent):
    name: str
    category_id: UUID
    price: JsonDecimal


class ItemDeletedEvent(ItemEvent):
    pass
