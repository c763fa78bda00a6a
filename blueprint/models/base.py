"""
Declarative base shared by all ORM models
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all ORM models"""
    pass


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()
