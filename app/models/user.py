"""User model for SQLModel."""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from app.utils.time import utcnow

if TYPE_CHECKING:
    from app.models.task import Task


class User(SQLModel, table=True):
    """User entity keyed by the identity provider's object id."""

    id: str = Field(primary_key=True, index=True, max_length=100)
    name: str = Field(max_length=100)
    email: str = Field(unique=True, index=True, max_length=255)
    role: str = Field(default="User", max_length=50)
    department: Optional[str] = Field(default=None, max_length=255)
    profile_picture_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=False))
    last_login_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))

    # Relationships
    tasks: List["Task"] = Relationship(back_populates="user")
