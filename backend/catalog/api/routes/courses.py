from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from catalog.api.deps import get_course_registry, get_file_registry
from catalog.db.models.course import Course
from catalog.schemas.course import CourseCreate, CoursePublic
from catalog.schemas.message import MessageResponse
from catalog.services.registry import CourseRegistry, FileRegistry, parse_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["courses"])


@router.get("/courses", response_model=list[CoursePublic])
async def list_courses(
    courses: CourseRegistry = Depends(get_course_registry),
) -> list[Course]:
    try:
        return await courses.list_all()
    except SQLAlchemyError as e:
        logger.exception("Listing courses failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch courses",
        ) from e


@router.post("/admin/add-course", response_model=MessageResponse)
async def add_course(
    body: CourseCreate,
    courses: CourseRegistry = Depends(get_course_registry),
) -> MessageResponse:
    if not body.name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Course name is required")

    try:
        # Check-then-insert; concurrent requests for one name can both pass.
        if await courses.find_by_name(body.name) is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Course already exists")
        await courses.add(body.name)
    except SQLAlchemyError as e:
        logger.exception("Adding course %r failed", body.name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error adding course",
        ) from e

    return MessageResponse(message="Course added successfully")


@router.delete("/admin/delete-course/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: str,
    courses: CourseRegistry = Depends(get_course_registry),
    files: FileRegistry = Depends(get_file_registry),
) -> MessageResponse:
    parsed = parse_id(course_id)
    try:
        course = await courses.get(parsed) if parsed is not None else None
        if course is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")

        results = await courses.delete(course, files)
    except (SQLAlchemyError, OSError) as e:
        logger.exception("Deleting course %s failed", course_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting course",
        ) from e

    failed = sum(1 for r in results if not r.ok)
    logger.info(
        "Deleted course %r with %d stored object(s), %d cleanup failure(s)",
        course.name,
        len(results),
        failed,
    )
    return MessageResponse(message="Course and its files deleted successfully")
