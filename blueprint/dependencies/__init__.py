"""
Dependencies module initialization
"""

from .auth import get_current_user, require_user_email
from .item import get_category_service, get_event_publisher, get_item_service

__all__ = [
    "get_current_user",
    "require_user_email",
    "get_category_service",
    "get_event_publisher",
    "get_item_service",
]
