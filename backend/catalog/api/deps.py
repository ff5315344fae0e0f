from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.settings import Settings, get_settings
from catalog.db.session import get_db
from catalog.services.object_store import LocalObjectStore
from catalog.services.registry import CourseRegistry, FileRegistry


def get_object_store(settings: Settings = Depends(get_settings)) -> LocalObjectStore:
    return LocalObjectStore(settings.upload_dir)


async def get_course_registry(db: AsyncSession = Depends(get_db)) -> CourseRegistry:
    return CourseRegistry(db)


async def get_file_registry(
    db: AsyncSession = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
) -> FileRegistry:
    return FileRegistry(db, store)
