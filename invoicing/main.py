from fastapi import FastAPI

from invoicing.api.v1 import v1_router
from invoicing.api.v1.envelope import register_error_handlers
from invoicing.config.settings import settings
from invoicing.core.db import engine
from invoicing.core.logging_config import setup_logging
from invoicing.infrastructure.db.base import Base

setup_logging()

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
register_error_handlers(app)


@app.on_event("startup")
async def startup():
    # Local convenience; deployed databases are migrated with alembic
    if settings.ENVIRONMENT == "dev":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)


@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.APP_NAME}


app.include_router(v1_router)
