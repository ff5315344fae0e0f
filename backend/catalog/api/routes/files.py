from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from catalog.api.deps import get_course_registry, get_file_registry
from catalog.db.models.course_file import CourseFile
from catalog.schemas.course_file import CourseFileCreate, CourseFilePublic
from catalog.schemas.message import MessageResponse
from catalog.services.registry import CourseRegistry, FileRegistry, parse_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


# `:path` keeps course names containing an encoded "/" routable.
@router.get("/files/{course:path}", response_model=list[CourseFilePublic])
async def list_files(
    course: str,
    files: FileRegistry = Depends(get_file_registry),
) -> list[CourseFile]:
    try:
        return await files.list_for_course(course)
    except SQLAlchemyError as e:
        logger.exception("Listing files for course %r failed", course)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch files",
        ) from e


@router.post("/admin/add-file", response_model=MessageResponse)
async def add_file(
    body: CourseFileCreate,
    courses: CourseRegistry = Depends(get_course_registry),
    files: FileRegistry = Depends(get_file_registry),
) -> MessageResponse:
    if not body.is_complete():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing fields")

    try:
        await courses.get_or_create(body.course)
        await files.add(title=body.title, url=body.url, course=body.course)
    except SQLAlchemyError as e:
        logger.exception("Adding file %r to course %r failed", body.title, body.course)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error adding file",
        ) from e

    return MessageResponse(message="File added successfully")


@router.delete("/admin/delete-file/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: str,
    files: FileRegistry = Depends(get_file_registry),
) -> MessageResponse:
    parsed = parse_id(file_id)
    try:
        item = await files.get(parsed) if parsed is not None else None
        if item is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

        await files.delete(item)
    except (SQLAlchemyError, OSError) as e:
        logger.exception("Deleting file %s failed", file_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting file",
        ) from e

    return MessageResponse(message="File deleted successfully")
