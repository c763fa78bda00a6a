"""
Category ORM model
"""

import uuid
from typing import List, TYPE_CHECKING

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blueprint.models.base import Base, new_uuid

if TYPE_CHECKING:
    from blueprint.models.item import Item

CATEGORY_NAME_MAX_LENGTH = 20

DEFAULT_CATEGORIES = ["General", "Urgent", "Archived", "Favorites", "Upcoming"]


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(CATEGORY_NAME_MAX_LENGTH), nullable=False)

    items: Mapped[List["Item"]] = relationship(back_populates="category")

    def __repr__(self) -> str:
        return f"Category(id={self.id!s}, name={self.name!r})"
