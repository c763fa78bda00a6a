"""
Database module initialization
"""

from .database import (
    db,
    connect_to_database,
    close_database_connection,
    create_schema,
    get_session,
    ping_database,
)
from .seed import seed_categories

__all__ = [
    "db",
    "connect_to_database",
    "close_database_connection",
    "create_schema",
    "get_session",
    "ping_database",
    "seed_categories",
]
