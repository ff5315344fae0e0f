from __future__ import annotations

from fastapi import APIRouter

from catalog.api.routes import courses, files, uploads

api_router = APIRouter()
api_router.include_router(courses.router)
api_router.include_router(files.router)
api_router.include_router(uploads.router)
