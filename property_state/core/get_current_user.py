import uuid

from fastapi import Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.models import User

from .get_db import get_db_async
from .validators import jwt_protect


async def get_current_user_id(user_id: uuid.UUID = Depends(jwt_protect)) -> uuid.UUID:
    return user_id


async def get_current_user(
    user_id: uuid.UUID = Depends(jwt_protect), db: AsyncSession = Depends(get_db_async)
) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()

    if not user:
        raise HTTPException(status_code=401, detail="Not Authenticated")

    return user
