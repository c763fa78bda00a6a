"""
User model for authentication
"""

from typing import List, Optional
from pydantic import BaseModel, EmailStr


class User(BaseModel):
    """User model from JWT token payload"""

    id: str
    email: Optional[EmailStr] = None
    roles: List[str] = []
