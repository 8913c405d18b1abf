from fastapi import APIRouter, Depends
from fastapi_utils.cbv import cbv
from sqlalchemy.ext.asyncio import AsyncSession

from core.get_current_user import get_current_user
from core.get_db import get_db_async
from core.safe_handler import safe_handler
from models.models import User
from schemas.schema import UserUpdate
from services.auth_service import AuthService
from services.post_service import PostService

router = APIRouter(tags=["Users"])


@cbv(router)
class UserRoutes:
    @router.get("/users/profilePosts")
    @safe_handler
    async def profile_posts(
        self,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await PostService(db).get_posts_by_user(current_user)

    @router.get("/users/{user_id}")
    @safe_handler
    async def get_user(
        self,
        user_id: str,
        db: AsyncSession = Depends(get_db_async),
    ):
        return await AuthService(db).get_user(user_id)

    @router.put("/users/{user_id}")
    @safe_handler
    async def update_user(
        self,
        user_id: str,
        data: UserUpdate,
        db: AsyncSession = Depends(get_db_async),
        current_user: User = Depends(get_current_user),
    ):
        return await AuthService(db).update_user(
            user_id=user_id, current_user=current_user, data=data
        )
