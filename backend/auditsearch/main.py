from contextlib import asynccontextmanager

from fastapi import FastAPI

from auditsearch.api.router import api_router
from auditsearch.core.config import settings
from auditsearch.core.logging import configure_logging
from auditsearch.services.storage import reset_backend

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(_: FastAPI):
    try:
        yield
    finally:
        # Release the search client connection pools.
        await reset_backend()


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
app.include_router(api_router)
