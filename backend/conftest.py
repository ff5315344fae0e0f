from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Ensure `import catalog...` works when running pytest without installing the package.
BACKEND_ROOT = Path(__file__).resolve().parent
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from catalog.core.settings import get_settings  # noqa: E402
from catalog.db.base import Base  # noqa: E402
from catalog.db.models import course as _course_model  # noqa: F401,E402
from catalog.db.models import course_file as _course_file_model  # noqa: F401,E402
from catalog.db.session import get_db  # noqa: E402
from catalog.main import create_app  # noqa: E402
from catalog.services.object_store import LocalObjectStore  # noqa: E402


@dataclass
class CatalogHarness:
    app: FastAPI
    client: httpx.AsyncClient
    upload_dir: Path
    session_maker: async_sessionmaker[AsyncSession]


@pytest_asyncio.fixture
async def catalog(tmp_path, monkeypatch):
    """A fresh app wired to a throwaway SQLite database and upload directory."""
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("CORS_ORIGINS", "*")
    get_settings.cache_clear()

    engine = create_async_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

    async def _get_test_db():
        async with SessionLocal() as session:
            yield session

    app = create_app()
    app.dependency_overrides[get_db] = _get_test_db

    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield CatalogHarness(
                app=app,
                client=client,
                upload_dir=LocalObjectStore(get_settings().upload_dir).root,
                session_maker=SessionLocal,
            )
    finally:
        app.dependency_overrides.clear()
        await engine.dispose()
        get_settings.cache_clear()
