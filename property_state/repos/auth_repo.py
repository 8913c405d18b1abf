import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models.models import User


class AuthRepo:
    def __init__(self, db):
        self.db = db

    async def _first(self, *conditions) -> Optional[User]:
        result = await self.db.execute(select(User).where(*conditions))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        return await self._first(User.username == username.strip())

    async def get_by_email(self, email: str) -> User | None:
        return await self._first(User.email == email.strip().lower())

    async def by_id(self, user_id: uuid.UUID) -> Optional[User]:
        return await self._first(User.id == user_id)

    async def create(self, user: User) -> User:
        if user.id is not None:
            raise ValueError("Account already persisted, call update() instead")
        self.db.add(user)
        return await self._save(user)

    async def update(self, user: User) -> User:
        if user.id is None:
            raise ValueError("Account not persisted yet, call create() instead")
        return await self._save(user)

    async def _save(self, user: User) -> User:
        # Unique username/email races surface here as IntegrityError.
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        await self.db.refresh(user)
        return user
