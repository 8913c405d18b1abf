import logging

from fastapi import HTTPException
from fastapi.responses import JSONResponse

from core.breaker import CircuitBreaker
from core.check_permission import CheckOwnership
from core.mapper import ORMMapper
from core.settings import settings
from models.models import User
from models.utils import parse_uuid
from repos.auth_repo import AuthRepo
from schemas.schema import (
    LoginOut,
    UserCreate,
    UserLoginInput,
    UserPublicSchema,
    UserUpdate,
)
from security.security_generate import user_generate

logger = logging.getLogger(__name__)

ACCESS_EXPIRE_MINUTES = settings.ACCESS_EXPIRE_MINUTES
SECURE_COOKIES = settings.SECURE_COOKIES


class AuthService:
    def __init__(self, db):
        self.repo: AuthRepo = AuthRepo(db)
        self.breaker: CircuitBreaker = CircuitBreaker()
        self.permission: CheckOwnership = CheckOwnership()
        self.mapper: ORMMapper = ORMMapper()

    async def register(self, data: UserCreate):
        async def handler():
            if await self.repo.get_by_email(email=data.email):
                raise HTTPException(status_code=400, detail="Email already registered")
            if await self.repo.get_by_username(username=data.username):
                raise HTTPException(status_code=400, detail="Username already taken")

            user = User(
                username=data.username,
                email=data.email,
                avatar=data.avatar,
                full_name=data.full_name,
            )
            user.set_password(raw_password=data.password)
            await self.repo.create(user)
            logger.info(f"Registered user {user.id}")

            return JSONResponse(
                {"message": "User created successfully"},
                status_code=201,
            )

        return await self.breaker.call(handler)

    async def login(self, data: UserLoginInput):
        async def handler():
            user = await self.repo.get_by_username(data.username)
            if not user or not user.check_password(raw_password=data.password):
                raise HTTPException(status_code=401, detail="Invalid credentials")

            access_token = user_generate.generate_access_token(
                user_id=user.id, username=user.username, email=user.email
            )
            body = self.mapper.one(user, LoginOut, token=access_token)
            response = JSONResponse(
                body.model_dump(mode="json", by_alias=True),
                status_code=200,
            )
            response.set_cookie(
                key="access_token",
                value=access_token,
                httponly=True,
                secure=SECURE_COOKIES,
                samesite="lax",
                max_age=ACCESS_EXPIRE_MINUTES * 60,
            )
            return response

        return await self.breaker.call(handler)

    async def logout(self):
        response = JSONResponse({"message": "Logout Successful"})
        response.delete_cookie(
            key="access_token",
            path="/",
            secure=SECURE_COOKIES,
            httponly=True,
            samesite="lax",
        )
        return response

    async def get_user(self, user_id: str) -> UserPublicSchema:
        async def handler():
            user_uuid = parse_uuid(user_id)
            user = await self.repo.by_id(user_uuid) if user_uuid else None
            if not user:
                raise HTTPException(status_code=404, detail="User not found")
            return self.mapper.one(user, UserPublicSchema)

        return await self.breaker.call(handler)

    async def update_user(self, user_id: str, current_user, data: UserUpdate):
        async def handler():
            user_uuid = parse_uuid(user_id)
            user = await self.repo.by_id(user_uuid) if user_uuid else None
            await self.permission.check_owner(
                owner_id=user.id if user else None,
                user_id=current_user.id,
                resource="User",
                action="update",
            )

            update_data = data.model_dump(exclude_unset=True, exclude_none=True)
            if not update_data:
                raise HTTPException(
                    status_code=400, detail="No fields provided for update."
                )

            email = update_data.get("email", "").strip().lower()
            if email and email != user.email:
                if await self.repo.get_by_email(email):
                    raise HTTPException(status_code=400, detail="Email already registered")
                user.email = email

            username = update_data.get("username")
            if username and username != user.username:
                if await self.repo.get_by_username(username):
                    raise HTTPException(status_code=400, detail="Username already taken")
                user.username = username

            if "password" in update_data:
                user.set_password(update_data["password"])
            if "avatar" in update_data:
                user.avatar = update_data["avatar"]
            if "full_name" in update_data:
                user.full_name = update_data["full_name"]

            await self.repo.update(user)
            return self.mapper.one(user, UserPublicSchema)

        return await self.breaker.call(handler)
