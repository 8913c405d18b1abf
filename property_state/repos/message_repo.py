from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from models.models import Chat, Message


class MessageRepo:
    def __init__(self, db):
        self.db = db

    async def create(self, chat: Chat, sender_id: UUID, text: str) -> Message:
        """Store a message and refresh the chat's cached summary.

        The sender's counterpart gets one more unread message; the sender's
        own counter is cleared since they have obviously seen the thread.
        """
        msg = Message(chat_id=chat.id, user_id=sender_id, text=text)
        self.db.add(msg)

        chat.last_message = text
        if sender_id == chat.user_one_id:
            chat.user_one_unread = 0
            chat.user_two_unread = chat.user_two_unread + 1
        else:
            chat.user_two_unread = 0
            chat.user_one_unread = chat.user_one_unread + 1

        try:
            await self.db.commit()
            return msg
        except SQLAlchemyError:
            await self.db.rollback()
            raise
