import uuid

from fastapi import APIRouter, Depends, Request
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user, get_current_user_id
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import PostCreate, PostUpdate
from services.post_service import PostService

router = APIRouter(tags=["Posts"])


@cbv(router)
class PostRoutes:
    @router.get("/posts")
    @safe_handler
    async def list_posts(
        self,
        request: Request,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PostService(db).get_posts(dict(request.query_params))

    @router.get("/posts/{post_id}")
    @safe_handler
    async def get_post(
        self,
        post_id: str,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await PostService(db).get_post(post_id)

    @router.post("/posts", status_code=201)
    @safe_handler
    async def create(
        self,
        data: PostCreate,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await PostService(db).create_post(data=data, current_user=current_user)

    @router.put("/posts/{post_id}")
    @safe_handler
    async def update(
        self,
        post_id: str,
        data: PostUpdate,
        db: AsyncSession = Depends(get_db_async),
        user_id: uuid.UUID = Depends(get_current_user_id),
    ):
        return await PostService(db).update_post(
            post_id=post_id, user_id=user_id, data=data
        )

    @router.delete("/posts/{post_id}")
    @safe_handler
    async def delete(
        self,
        post_id: str,
        db: AsyncSession = Depends(get_db_async),
        user_id: uuid.UUID = Depends(get_current_user_id),
    ):
        return await PostService(db).delete_post(post_id=post_id, user_id=user_id)
