from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ValidationErrorHandler:
    async def __call__(self, request: Request, exc: RequestValidationError):

        errors = []

        for err in exc.errors():
            errors.append({
                "loc": err.get("loc"),
                "msg": str(err.get("msg")),
                "type": err.get("type"),
            })

        return JSONResponse(
            status_code=400,
            content={
                "message": "Validation failed",
                "details": errors,
            },
        )


class HTTPErrorHandler:
    def __init__(self, expose_stack: bool = False):
        self.expose_stack = expose_stack

    async def __call__(self, request: Request, exc: StarletteHTTPException):
        content = {"message": exc.detail}
        stack = getattr(exc, "stack", None)
        if self.expose_stack and stack:
            content["stack"] = stack
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )
