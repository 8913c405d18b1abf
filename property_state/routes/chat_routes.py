import uuid

from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user_id
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from schemas.schema import ChatCreate, MessageCreate
from services.chat_service import ChatService

router = APIRouter(tags=["Messaging"])


@cbv(router)
class ChatRoutes:
    db: AsyncSession = Depends(get_db_async)
    user_id: uuid.UUID = Depends(get_current_user_id)

    @router.get("/chats")
    @safe_handler
    async def list_chats(self):
        return await ChatService(self.db).list_chats(self.user_id)

    @router.post("/chats")
    @safe_handler
    async def open_chat(self, data: ChatCreate):
        return await ChatService(self.db).get_or_create_chat(data, self.user_id)

    @router.get("/chats/{chat_id}")
    @safe_handler
    async def get_chat(self, chat_id: str):
        return await ChatService(self.db).get_chat(chat_id, self.user_id)

    @router.put("/chats/read/{chat_id}")
    @safe_handler
    async def read_chat(self, chat_id: str):
        return await ChatService(self.db).read_chat(chat_id, self.user_id)

    @router.post("/messages/{chat_id}", status_code=201)
    @safe_handler
    async def add_message(self, chat_id: str, data: MessageCreate):
        return await ChatService(self.db).send_message(chat_id, self.user_id, data)
