"""SQLModel implementation of the user store."""
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.user import User
from app.repositories.base import UserStore


class UserRepository(UserStore):
    """User persistence backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def exists(self, user_id: str) -> bool:
        return self.get_by_id(user_id) is not None

    def create(self, user: User) -> User:
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def update_last_login(self, user_id: str, when: datetime) -> bool:
        user = self.get_by_id(user_id)
        if user is None:
            return False
        user.last_login_at = when
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return True
