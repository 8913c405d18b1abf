import logging
import traceback

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, expose_stack: bool = False):
        super().__init__(app)
        self.expose_stack = expose_stack

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(f"Unhandled server error:{e}")

            content = {"message": "Something went wrong on our end. Please try again."}
            if self.expose_stack:
                content["stack"] = "".join(
                    traceback.format_exception(type(e), e, e.__traceback__)
                )
            return JSONResponse(content, status_code=500)
