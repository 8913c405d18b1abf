import uuid

import jwt
from fastapi import HTTPException, Request

from models.enums import TokenType

from .settings import settings


def extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization")
    if header:
        scheme, _, token = header.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
        return None
    return request.cookies.get("access_token")


def decode_token_claims(token: str) -> dict:
    """Verify signature and expiry; raises PyJWT errors on failure."""
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        options={"require": ["exp", "sub"]},
    )


def decode_http_access_token(token: str) -> uuid.UUID:
    payload = decode_token_claims(token)

    if payload.get("type", TokenType.ACCESS.value) != TokenType.ACCESS.value:
        raise ValueError("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Token missing user ID")

    return uuid.UUID(str(user_id))


async def jwt_protect(request: Request) -> uuid.UUID:
    token = extract_bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        return decode_http_access_token(token)

    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token")
