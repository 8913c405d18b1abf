import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .get_db import init_models

logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Waiting for application startup...")

    try:
        await init_models(app.state.engine)
        logger.info("Database tables ready.")
    except Exception:
        # The API still starts; list reads degrade to empty results.
        logger.exception("Database initialisation failed")

    logger.info("Application startup complete.")

    yield

    try:
        await app.state.engine.dispose()
    except Exception:
        logger.exception("Failed to dispose database engine")
