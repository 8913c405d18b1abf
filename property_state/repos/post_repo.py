import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from core.post_filter import PostFilter
from models.models import Post, PostDetail, User

OWNER_COLUMNS = (
    User.id,
    User.username,
    User.email,
    User.avatar,
    User.full_name,
    User.created_at,
)

POST_FIELDS = (
    "title",
    "price",
    "images",
    "address",
    "city",
    "bedroom",
    "bathroom",
    "latitude",
    "longitude",
    "type",
    "property",
)

DETAIL_FIELDS = (
    "desc",
    "utilities",
    "pet",
    "income",
    "size",
    "school",
    "bus",
    "restaurant",
)


def _owner_projection():
    return selectinload(Post.user).load_only(*OWNER_COLUMNS)


class PostRepo:
    def __init__(self, db):
        self.db = db

    async def _fetch_all(self, stmt) -> List[Post]:
        try:
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def list_with_owner(self, criteria: PostFilter) -> List[Post]:
        stmt = (
            select(Post)
            .options(_owner_projection())
            .where(*criteria.clauses())
            .order_by(Post.created_at.desc())
        )
        return await self._fetch_all(stmt)

    async def list_without_owner(self, criteria: PostFilter) -> List[Post]:
        stmt = (
            select(Post)
            .where(*criteria.clauses())
            .order_by(Post.created_at.desc())
        )
        return await self._fetch_all(stmt)

    async def list_by_user(self, user_id: uuid.UUID) -> List[Post]:
        stmt = (
            select(Post)
            .options(_owner_projection())
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc())
        )
        return await self._fetch_all(stmt)

    async def get_post_with_relations(self, post_id: uuid.UUID) -> Optional[Post]:
        result = await self.db.execute(
            select(Post)
            .options(selectinload(Post.post_detail), _owner_projection())
            .where(Post.id == post_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_owner_id(self, post_id: uuid.UUID) -> Optional[uuid.UUID]:
        result = await self.db.execute(select(Post.user_id).where(Post.id == post_id))
        return result.scalar_one_or_none()

    async def get_detail(self, post_id: uuid.UUID) -> Optional[PostDetail]:
        result = await self.db.execute(
            select(PostDetail).where(PostDetail.post_id == post_id)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: uuid.UUID,
        post_data: dict,
        detail_data: dict | None = None,
    ) -> Post:
        """Insert a listing and, when given, its detail in one commit.

        Keys absent from ``post_data`` are left to the column defaults.
        """
        new_post = Post(user_id=user_id, **post_data)
        self.db.add(new_post)
        try:
            await self.db.flush()
            if detail_data is not None:
                self.db.add(PostDetail(post_id=new_post.id, **detail_data))
            await self.db.commit()
            return new_post
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def update(self, post_id: uuid.UUID, **fields) -> Optional[Post]:
        result = await self.db.execute(select(Post).where(Post.id == post_id))
        post = result.scalar_one_or_none()
        if post is None:
            return None

        for name, value in fields.items():
            if name in POST_FIELDS and value is not None:
                setattr(post, name, value)

        try:
            await self.db.commit()
            return post
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def upsert_detail(self, post_id: uuid.UUID, **fields) -> PostDetail:
        """Create the detail row if missing, otherwise patch it.

        ``None`` values leave an existing column unchanged. Commits on its
        own, separately from the parent listing update.
        """
        detail = await self.get_detail(post_id)
        values = {
            name: value
            for name, value in fields.items()
            if name in DETAIL_FIELDS and value is not None
        }

        if detail is None:
            values.setdefault("desc", "")
            detail = PostDetail(post_id=post_id, **values)
            self.db.add(detail)
        else:
            for name, value in values.items():
                setattr(detail, name, value)

        try:
            await self.db.commit()
            return detail
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def delete_post(self, post_id: uuid.UUID) -> int:
        try:
            await self.db.execute(
                delete(PostDetail).where(PostDetail.post_id == post_id)
            )
            result = await self.db.execute(delete(Post).where(Post.id == post_id))
            await self.db.commit()
            return result.rowcount
        except SQLAlchemyError:
            await self.db.rollback()
            raise
