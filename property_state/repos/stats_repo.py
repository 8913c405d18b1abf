from sqlalchemy import func, select

from models.models import Chat, Message, Post, PostDetail, User


class StatsRepo:
    COLLECTIONS = {
        "users": User,
        "posts": Post,
        "post_details": PostDetail,
        "chats": Chat,
        "messages": Message,
    }

    def __init__(self, db):
        self.db = db

    async def count(self, model) -> int:
        result = await self.db.execute(select(func.count()).select_from(model))
        return result.scalar_one()

    async def collection_counts(self) -> dict[str, int]:
        return {name: await self.count(model) for name, model in self.COLLECTIONS.items()}
