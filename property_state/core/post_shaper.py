from datetime import datetime, timezone
from typing import Iterable, List

from models.models import Post, User
from schemas.schema import OwnerInfo, PostOut

from .mapper import ORMMapper, unloaded_attributes

UNKNOWN_CITY = "Unknown City"


class PostShaper:
    """Attach the derived ``ownerInfo`` projection to listing rows.

    The projection is always present: rows loaded without their owner get
    the "unknown user" sentinel instead.
    """

    def __init__(self):
        self.mapper: ORMMapper = ORMMapper()

    @staticmethod
    def location(post: Post) -> str:
        return post.city or UNKNOWN_CITY

    def owner_info(self, post: Post, owner: User | None) -> OwnerInfo:
        if owner is None:
            return self.unknown_owner(post)
        return OwnerInfo(
            id=str(owner.id),
            username=owner.username,
            email=owner.email,
            full_name=owner.full_name or owner.username,
            avatar=owner.avatar,
            verified=False,
            show_contact_info=True,
            member_since=owner.created_at,
            location=self.location(post),
        )

    def unknown_owner(self, post: Post) -> OwnerInfo:
        return OwnerInfo(
            id="unknown",
            username="Unknown User",
            email="",
            full_name="Unknown",
            avatar="",
            verified=False,
            show_contact_info=False,
            member_since=datetime.now(timezone.utc),
            location=self.location(post),
        )

    @staticmethod
    def loaded_owner(post: Post) -> User | None:
        if "user" in unloaded_attributes(post):
            return None
        return post.user

    def one(self, post: Post) -> PostOut:
        return self.mapper.one(
            post,
            PostOut,
            owner_info=self.owner_info(post, self.loaded_owner(post)),
        )

    def many(self, posts: Iterable[Post]) -> List[PostOut]:
        return [self.one(post) for post in posts]
