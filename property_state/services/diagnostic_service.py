import logging
import traceback
from uuid import UUID

import jwt
from fastapi import Request
from fastapi.responses import JSONResponse

from core.friendly_msg import get_friendly_message
from core.settings import settings
from core.validators import decode_token_claims, extract_bearer_token
from repos.stats_repo import StatsRepo
from schemas.schema import AuthCheckOut, AuthenticatedOut, DbStatsOut, TokenUserOut

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, stack: str | None = None) -> JSONResponse:
    content = {"status": "error", "message": message}
    if stack and not settings.is_production:
        content["stack"] = stack
    return JSONResponse(content, status_code=status_code)


class DiagnosticService:
    """Operator probes. They answer with a status envelope instead of raising."""

    def __init__(self, db=None):
        self.stats: StatsRepo | None = StatsRepo(db) if db is not None else None

    @staticmethod
    def authenticated(user_id: UUID) -> AuthenticatedOut:
        return AuthenticatedOut(message="You are Authenticated", user_id=user_id)

    async def db_stats(self):
        try:
            counts = await self.stats.collection_counts()
        except Exception as e:
            logger.exception("Database stats probe failed")
            return _error(
                500,
                get_friendly_message(e),
                "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            )
        body = DbStatsOut(status="connected", collections=counts)
        return body.model_dump(by_alias=True)

    @staticmethod
    def auth_check(request: Request):
        token = extract_bearer_token(request)
        if not token:
            return _error(401, "No token provided")

        try:
            claims = decode_token_claims(token)
        except jwt.ExpiredSignatureError:
            return _error(401, "Token expired")
        except jwt.InvalidTokenError as e:
            logger.info(f"auth-check rejected token: {e}")
            return _error(401, "Invalid token")

        user = TokenUserOut(
            id=claims.get("sub"),
            username=claims.get("username"),
            email=claims.get("email"),
        )
        return AuthCheckOut(status="authenticated", user=user)
