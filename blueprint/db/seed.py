"""
Startup seeding of reference data
"""

from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blueprint.core.logger import logger
from blueprint.models import Category, DEFAULT_CATEGORIES


async def seed_categories(session: AsyncSession, names: List[str] = None) -> int:
    """
    Insert the default categories when the table is empty.

    Returns:
        Number of categories inserted (0 when already seeded)
    """
    existing = await session.scalar(select(func.count()).select_from(Category))
    if existing:
        logger.debug("Categories already seeded", metadata={"count": existing})
        return 0

    names = names or DEFAULT_CATEGORIES
    session.add_all([Category(name=name) for name in names])
    await session.commit()

    logger.info(
        f"Seeded {len(names)} categories",
        metadata={"event": "categories_seeded", "categories": names}
    )
    return len(names)
