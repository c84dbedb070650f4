from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from phonebook.api.routers import auth, contacts, me
from phonebook.infrastructure.db.engine import get_engine, init_db
from phonebook.shared.config import get_settings


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    if settings.db_auto_create and settings.postgres_dsn:
        init_db(get_engine(settings.postgres_dsn))
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Phonebook API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SQLAlchemyError)
    async def _database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("database_error: path=%s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    app.include_router(auth.router)
    app.include_router(me.router)
    app.include_router(contacts.router)

    avatars_dir = Path(settings.avatars_dir)
    app.mount("/avatars", StaticFiles(directory=avatars_dir, check_dir=False), name="avatars")
    return app


app = create_app()
