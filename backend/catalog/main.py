from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog.api.router import api_router
from catalog.core.logging import setup_logging
from catalog.core.settings import get_settings
from catalog.db.session import dispose_engines, get_db, ping
from catalog.services.object_store import PUBLIC_MOUNT_PATH, LocalObjectStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await dispose_engines()


def _install_error_handlers(app: FastAPI) -> None:
    # Every error leaves the service as {"message": ...}.

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Course Catalog API", lifespan=lifespan)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials="*" not in settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    _install_error_handlers(app)

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/health/db")
    async def health_db(db: AsyncSession = Depends(get_db)):
        await ping(db)
        return {"ok": True}

    app.include_router(api_router)

    store = LocalObjectStore(settings.upload_dir)
    store.ensure_root()
    app.mount(PUBLIC_MOUNT_PATH, StaticFiles(directory=store.root), name="uploads")
    logger.info("Serving uploads from %s at %s", store.root, PUBLIC_MOUNT_PATH)

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("catalog.main:app", host=settings.host, port=settings.port)


app = create_app()
