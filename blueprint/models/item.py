"""
Item ORM model
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blueprint.models.base import Base, new_uuid
from blueprint.models.category import Category

ITEM_NAME_MAX_LENGTH = 50
ITEM_DESCRIPTION_MAX_LENGTH = 500


class Item(Base):
    """A catalog item, owned exclusively by the relational store"""

    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(ITEM_NAME_MAX_LENGTH), nullable=False)
    category_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("categories.id"), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    release_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(ITEM_DESCRIPTION_MAX_LENGTH), nullable=False)
    last_updated_by: Mapped[str] = mapped_column(String(256), nullable=False)

    category: Mapped[Optional[Category]] = relationship(back_populates="items", lazy="selectin")

    def __repr__(self) -> str:
        return f"Item(id={self.id!s}, name={self.name!r})"
