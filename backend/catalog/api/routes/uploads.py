from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError

from catalog.api.deps import get_course_registry, get_file_registry, get_object_store
from catalog.core.settings import Settings, get_settings
from catalog.schemas.message import MessageResponse
from catalog.services.object_store import LocalObjectStore
from catalog.services.registry import CourseRegistry, FileRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["uploads"])


@router.post("/upload-file", response_model=MessageResponse)
async def upload_file(
    # Same limits as the String(255) columns they land in.
    title: str | None = Form(default=None, max_length=255),
    course: str | None = Form(default=None, max_length=255),
    file: UploadFile | None = File(default=None),
    courses: CourseRegistry = Depends(get_course_registry),
    files: FileRegistry = Depends(get_file_registry),
    store: LocalObjectStore = Depends(get_object_store),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    title = (title or "").strip()
    course = (course or "").strip()
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing fields or file")

    try:
        if not title or not course or not file.filename:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing fields or file")

        if file.size is not None and file.size > settings.upload_max_size_bytes:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File too large")

        await file.seek(0)
        url = await store.save(file.file, file.filename)
    except OSError as e:
        logger.exception("Writing upload %r failed", file.filename)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error uploading file",
        ) from e
    finally:
        await file.close()

    try:
        await courses.get_or_create(course)
        await files.add(title=title, url=url, course=course)
    except SQLAlchemyError as e:
        logger.exception("Recording upload %s for course %r failed", url, course)
        # Don't leave an object behind that no record points at.
        cleanup = await store.delete(url)
        if not cleanup.ok:
            logger.warning("Failed to remove orphaned upload %s: %s", url, cleanup.error)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error uploading file",
        ) from e

    return MessageResponse(message="File uploaded successfully")
