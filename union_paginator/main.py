"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from union_paginator.config import get_settings
from union_paginator.db.base import Base
from union_paginator.db.session import engine
from union_paginator.routers import feed

logger = logging.getLogger(__name__)


def _create_schema() -> None:
    """Create demo tables that do not exist yet."""

    Base.metadata.create_all(bind=engine)
    logger.info("union_paginator.schema_ready tables=%s", ",".join(sorted(Base.metadata.tables)))


@asynccontextmanager
async def lifespan(_: FastAPI):
    _create_schema()
    yield


app = FastAPI(title=get_settings().app_name, version="0.1.0", lifespan=lifespan)

app.include_router(feed.router, tags=["feed"])
