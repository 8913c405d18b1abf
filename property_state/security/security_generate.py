from datetime import datetime, timedelta, timezone

import jwt

from core.settings import settings
from models.enums import TokenType


class UserGenerate:
    def generate_access_token(
        self,
        user_id,
        username: str | None = None,
        email: str | None = None,
        expires_minutes: int | None = None,
    ) -> str:
        minutes = (
            settings.ACCESS_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
        )
        claims = {
            "sub": str(user_id),
            "type": TokenType.ACCESS.value,
            "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
        }
        if username:
            claims["username"] = username
        if email:
            claims["email"] = email
        return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.ALGORITHM)


user_generate = UserGenerate()
