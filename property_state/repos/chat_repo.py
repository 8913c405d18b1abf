from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from models.models import Chat, User

PARTICIPANT_COLUMNS = (User.id, User.username, User.avatar)


class ChatRepo:
    def __init__(self, db):
        self.db = db

    @staticmethod
    def _with_participants():
        return (
            selectinload(Chat.user_one).load_only(*PARTICIPANT_COLUMNS),
            selectinload(Chat.user_two).load_only(*PARTICIPANT_COLUMNS),
        )

    async def get_chat_by_id(self, chat_id: UUID) -> Chat | None:
        stmt = select(Chat).where(Chat.id == chat_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_chat_with_messages(self, chat_id: UUID) -> Chat | None:
        stmt = (
            select(Chat)
            .options(*self._with_participants(), selectinload(Chat.messages))
            .where(Chat.id == chat_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_chat_with_participants(self, chat_id: UUID) -> Chat | None:
        stmt = (
            select(Chat)
            .options(*self._with_participants())
            .where(Chat.id == chat_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_between(
        self, user_id: UUID, other_id: UUID, post_id: Optional[UUID]
    ) -> Chat | None:
        pair = or_(
            and_(Chat.user_one_id == user_id, Chat.user_two_id == other_id),
            and_(Chat.user_one_id == other_id, Chat.user_two_id == user_id),
        )
        post_clause = Chat.post_id.is_(None) if post_id is None else Chat.post_id == post_id
        stmt = select(Chat).where(pair, post_clause).order_by(Chat.created_at)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create(
        self, user_id: UUID, other_id: UUID, post_id: Optional[UUID]
    ) -> Chat:
        chat = Chat(user_one_id=user_id, user_two_id=other_id, post_id=post_id)
        self.db.add(chat)
        try:
            await self.db.commit()
            return chat
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def list_chats_for_user(self, user_id: UUID) -> List[Chat]:
        stmt = (
            select(Chat)
            .options(*self._with_participants())
            .where((Chat.user_one_id == user_id) | (Chat.user_two_id == user_id))
            .order_by(Chat.updated_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def mark_read(self, chat: Chat, user_id: UUID) -> Chat:
        if user_id == chat.user_one_id:
            chat.user_one_unread = 0
        else:
            chat.user_two_unread = 0
        try:
            await self.db.commit()
            return chat
        except SQLAlchemyError:
            await self.db.rollback()
            raise
