import logging
import uuid
from typing import List, Mapping

from fastapi import HTTPException
from fastapi.responses import JSONResponse

from core.breaker import CircuitBreaker
from core.check_permission import CheckOwnership
from core.fallback import DegradeToEmpty
from core.normalizer import to_int, to_int_or_none, to_text_or_none
from core.post_filter import FilterParseError, PostFilterBuilder
from core.post_shaper import PostShaper
from models.enums import PostType, PropertyTypes
from models.utils import parse_uuid
from repos.post_repo import PostRepo
from schemas.schema import PostCreate, PostDetailInput, PostOut, PostUpdate

logger = logging.getLogger(__name__)

DETAIL_TEXT_FIELDS = ("desc", "utilities", "pet", "income")
DETAIL_NUMERIC_FIELDS = ("size", "school", "bus", "restaurant")


class PostService:
    def __init__(self, db):
        self.repo: PostRepo = PostRepo(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.permission: CheckOwnership = CheckOwnership()
        self.filter_builder: PostFilterBuilder = PostFilterBuilder()
        self.shaper: PostShaper = PostShaper()
        self.list_policy: DegradeToEmpty = DegradeToEmpty("post-list")

    async def get_posts(self, query: Mapping[str, str]) -> List[PostOut]:
        """List listings matching ``query``, newest first.

        Never raises: a bad numeric filter or a storage fault degrades to
        the owner-less query and then to an empty list.
        """
        try:
            criteria = self.filter_builder.build(query)
        except FilterParseError as e:
            return self.list_policy.exhausted(reason=str(e))

        posts = await self.list_policy.run(
            ("with-owner", lambda: self.repo.list_with_owner(criteria)),
            ("without-owner", lambda: self.repo.list_without_owner(criteria)),
        )
        scope = "all listings" if criteria.is_empty else f"filter {criteria}"
        logger.info(f"Returning {len(posts)} posts for {scope}")
        return self.shaper.many(posts)

    async def get_post(self, post_id: str) -> PostOut:
        async def handler():
            post = await self._load(post_id)
            if not post:
                raise HTTPException(status_code=404, detail="Post not found")
            return self.shaper.one(post)

        return await self.breaker.call(handler)

    async def get_posts_by_user(self, current_user) -> List[PostOut]:
        async def handler():
            posts = await self.repo.list_by_user(current_user.id)
            return self.shaper.many(posts)

        return await self.breaker.call(handler)

    async def create_post(self, data: PostCreate, current_user) -> PostOut:
        async def handler():
            if not data.title or not data.price or not data.city:
                raise HTTPException(status_code=400, detail="Missing required fields")

            post_data = self._creation_fields(data)
            detail_data = (
                self._creation_detail(data.post_detail) if data.post_detail else None
            )

            try:
                # Coordinates are deliberately not written on create.
                new_post = await self.repo.create(
                    user_id=current_user.id,
                    post_data={**post_data, "latitude": None, "longitude": None},
                    detail_data=detail_data,
                )
            except Exception as e:
                logger.warning(f"Post creation failed, retrying without coordinates: {e}")
                new_post = await self.repo.create(
                    user_id=current_user.id,
                    post_data=post_data,
                    detail_data=detail_data,
                )

            logger.info(f"Post {new_post.id} created by {current_user.id}")
            post = await self.repo.get_post_with_relations(new_post.id)
            return self.shaper.one(post)

        return await self.breaker.call(handler)

    async def update_post(self, post_id: str, user_id: uuid.UUID, data: PostUpdate):
        async def handler():
            post_uuid = await self._check_owner(post_id, user_id, action="update")

            if data.post_detail is not None:
                # Committed on its own; a failure below leaves the new detail in place.
                await self.repo.upsert_detail(
                    post_uuid, **self._update_detail(data.post_detail)
                )

            await self.repo.update(post_uuid, **self._update_fields(data))

            post = await self.repo.get_post_with_relations(post_uuid)
            if not post:
                raise HTTPException(status_code=404, detail="Post not found")
            return self.shaper.one(post)

        return await self.breaker.call(handler)

    async def delete_post(self, post_id: str, user_id: uuid.UUID):
        async def handler():
            post_uuid = await self._check_owner(post_id, user_id, action="delete")
            await self.repo.delete_post(post_uuid)
            logger.info(f"Post {post_uuid} deleted by {user_id}")
            return JSONResponse({"message": "Post deleted"})

        return await self.breaker.call(handler)

    async def _load(self, post_id: str):
        post_uuid = parse_uuid(post_id)
        if post_uuid is None:
            return None
        return await self.repo.get_post_with_relations(post_uuid)

    async def _check_owner(
        self, post_id: str, user_id: uuid.UUID, action: str
    ) -> uuid.UUID:
        post_uuid = parse_uuid(post_id)
        owner_id = await self.repo.get_owner_id(post_uuid) if post_uuid else None
        await self.permission.check_owner(
            owner_id=owner_id, user_id=user_id, resource="Post", action=action
        )
        return post_uuid

    @staticmethod
    def _creation_fields(data: PostCreate) -> dict:
        try:
            price = to_int(data.price)
            bedroom = to_int(data.bedroom) if data.bedroom else 0
            bathroom = to_int(data.bathroom) if data.bathroom else 0
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid numeric field: {e}")

        return {
            "title": data.title,
            "price": price,
            "images": list(data.images or []),
            "address": data.address or "",
            "city": data.city,
            "bedroom": bedroom,
            "bathroom": bathroom,
            "type": (data.type or PostType.RENT).value,
            "property": (data.property or PropertyTypes.APARTMENT).value,
        }

    @staticmethod
    def _creation_detail(detail: PostDetailInput) -> dict:
        values = {name: getattr(detail, name) or "" for name in DETAIL_TEXT_FIELDS}
        for name in DETAIL_NUMERIC_FIELDS:
            values[name] = to_int_or_none(getattr(detail, name))
        return values

    @staticmethod
    def _update_fields(data: PostUpdate) -> dict:
        return {
            "title": data.title,
            "price": to_int_or_none(data.price),
            "images": data.images,
            "address": data.address,
            "city": data.city,
            "bedroom": to_int_or_none(data.bedroom),
            "bathroom": to_int_or_none(data.bathroom),
            "latitude": to_text_or_none(data.latitude),
            "longitude": to_text_or_none(data.longitude),
            "type": data.type.value if data.type else None,
            "property": data.property.value if data.property else None,
        }

    @staticmethod
    def _update_detail(detail: PostDetailInput) -> dict:
        values = {name: getattr(detail, name) for name in DETAIL_TEXT_FIELDS}
        for name in DETAIL_NUMERIC_FIELDS:
            values[name] = to_int_or_none(getattr(detail, name))
        return values
