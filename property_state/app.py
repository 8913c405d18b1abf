import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException as StarletteHTTPException

import models.event_listener  # noqa: F401
from core.catch_error_middleware import ErrorHandlerMiddleware
from core.exception_handler import HTTPErrorHandler, ValidationErrorHandler
from core.get_db import build_engine, build_session_factory
from core.lifespan import lifespan
from core.settings import Settings, settings
from routes.auth_routes import router as auth_router
from routes.chat_routes import router as chat_router
from routes.post_routes import router as post_router
from routes.test_routes import router as test_router
from routes.user_routes import router as user_router

logging.basicConfig(level=logging.INFO)


def create_app(
    app_settings: Settings = settings, engine: AsyncEngine | None = None
) -> FastAPI:
    """Build the API around one storage engine.

    Handlers never reach for a global session; they get one per request from
    ``app.state.session_factory`` so tests can hand in their own engine.
    """
    app = FastAPI(
        lifespan=lifespan,
        title=app_settings.PROJECT_NAME,
        version="1.0.0",
    )

    app.state.engine = engine or build_engine(app_settings.DATABASE_URL)
    app.state.session_factory = build_session_factory(app.state.engine)

    expose_stack = not app_settings.is_production
    prefix = app_settings.API_PREFIX

    app.include_router(auth_router, prefix=prefix)
    app.include_router(user_router, prefix=prefix)
    app.include_router(post_router, prefix=prefix)
    app.include_router(chat_router, prefix=prefix)
    app.include_router(test_router, prefix=prefix)

    @app.get("/health", tags=["System"])
    async def health_check():
        return {"status": "ok"}

    app.add_exception_handler(RequestValidationError, ValidationErrorHandler())
    app.add_exception_handler(
        StarletteHTTPException, HTTPErrorHandler(expose_stack=expose_stack)
    )

    app.add_middleware(ErrorHandlerMiddleware, expose_stack=expose_stack)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("app:app", host="127.0.0.1", port=8800, reload=True)
