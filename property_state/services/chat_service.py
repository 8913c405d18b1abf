import logging
from typing import List
from uuid import UUID

from fastapi import HTTPException
from fastapi.responses import JSONResponse

from core.breaker import CircuitBreaker
from core.check_permission import CheckOwnership
from core.mapper import ORMMapper
from models.models import Chat
from models.utils import parse_uuid
from repos.auth_repo import AuthRepo
from repos.chat_repo import ChatRepo
from repos.message_repo import MessageRepo
from schemas.schema import (
    ChatCreate,
    ChatDetailOut,
    ChatOut,
    MessageCreate,
    MessageOut,
)

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(self, db):
        self.chats: ChatRepo = ChatRepo(db)
        self.messages: MessageRepo = MessageRepo(db)
        self.users: AuthRepo = AuthRepo(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.permission: CheckOwnership = CheckOwnership()
        self.mapper: ORMMapper = ORMMapper()

    def _shape(self, chat: Chat, user_id: UUID, schema=ChatOut):
        other_id = chat.other_participant_id(user_id)
        receiver = chat.user_two if other_id == chat.user_two_id else chat.user_one
        return self.mapper.one(
            chat,
            schema,
            user_ids=list(chat.participant_ids),
            unread=chat.unread_for(user_id),
            receiver=receiver,
        )

    async def _participant_chat(self, chat_id: str, user_id: UUID, loader) -> Chat:
        chat_uuid = parse_uuid(chat_id)
        chat = await loader(chat_uuid) if chat_uuid else None
        await self.permission.check_participant(chat, user_id)
        return chat

    async def list_chats(self, user_id: UUID) -> List[ChatOut]:
        async def handler():
            chats = await self.chats.list_chats_for_user(user_id)
            return [self._shape(chat, user_id) for chat in chats]

        return await self.breaker.call(handler)

    async def get_or_create_chat(self, data: ChatCreate, user_id: UUID):
        """Return the conversation between the caller and ``receiverId``.

        One conversation exists per participant pair and listing; asking for
        it again answers 200 with the existing row instead of 201.
        """

        async def handler():
            receiver_id = parse_uuid(data.receiver_id)
            if receiver_id == user_id:
                raise HTTPException(
                    status_code=400, detail="Cannot start a chat with yourself"
                )
            receiver = await self.users.by_id(receiver_id) if receiver_id else None
            if not receiver:
                raise HTTPException(status_code=404, detail="Receiver not found")

            post_id = None
            if data.post_id:
                post_id = parse_uuid(data.post_id)
                if post_id is None:
                    raise HTTPException(status_code=400, detail="Invalid post id")

            chat = await self.chats.find_between(user_id, receiver.id, post_id)
            created = chat is None
            if created:
                chat = await self.chats.create(user_id, receiver.id, post_id)
                logger.info(f"Chat {chat.id} opened by {user_id} with {receiver.id}")

            chat = await self.chats.get_chat_with_participants(chat.id)
            body = self._shape(chat, user_id)
            return JSONResponse(
                body.model_dump(mode="json", by_alias=True),
                status_code=201 if created else 200,
            )

        return await self.breaker.call(handler)

    async def get_chat(self, chat_id: str, user_id: UUID) -> ChatDetailOut:
        async def handler():
            chat = await self._participant_chat(
                chat_id, user_id, self.chats.get_chat_with_messages
            )
            await self.chats.mark_read(chat, user_id)
            return self._shape(chat, user_id, schema=ChatDetailOut)

        return await self.breaker.call(handler)

    async def read_chat(self, chat_id: str, user_id: UUID) -> ChatOut:
        async def handler():
            chat = await self._participant_chat(
                chat_id, user_id, self.chats.get_chat_with_participants
            )
            await self.chats.mark_read(chat, user_id)
            return self._shape(chat, user_id)

        return await self.breaker.call(handler)

    async def send_message(
        self, chat_id: str, user_id: UUID, data: MessageCreate
    ) -> MessageOut:
        async def handler():
            chat = await self._participant_chat(
                chat_id, user_id, self.chats.get_chat_by_id
            )
            message = await self.messages.create(chat, user_id, data.text)
            logger.info(f"Message {message.id} added to chat {chat.id}")
            return self.mapper.one(message, MessageOut)

        return await self.breaker.call(handler)
