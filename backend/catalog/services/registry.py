from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.db.models.course import Course
from catalog.db.models.course_file import CourseFile
from catalog.services.object_store import CleanupResult, LocalObjectStore, is_local_url

logger = logging.getLogger(__name__)


def parse_id(raw: str) -> UUID | None:
    try:
        return UUID(str(raw))
    except (TypeError, ValueError):
        return None


def _log_cleanup(result: CleanupResult) -> None:
    if result.ok:
        return
    logger.warning("Failed to remove stored object %s: %s", result.url, result.error)


class FileRegistry:
    def __init__(self, db: AsyncSession, store: LocalObjectStore) -> None:
        self.db = db
        self.store = store

    async def list_for_course(self, course_name: str) -> list[CourseFile]:
        res = await self.db.execute(
            select(CourseFile)
            .where(CourseFile.course == course_name)
            .order_by(CourseFile.created_at)
        )
        return list(res.scalars().all())

    async def get(self, file_id: UUID) -> CourseFile | None:
        res = await self.db.execute(select(CourseFile).where(CourseFile.id == file_id))
        return res.scalar_one_or_none()

    async def add(self, *, title: str, url: str, course: str) -> CourseFile:
        item = CourseFile(title=title, url=url, course=course)
        self.db.add(item)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    async def _remove(self, item: CourseFile) -> CleanupResult | None:
        # Storage cleanup is best effort; the record goes regardless.
        result = None
        if is_local_url(item.url):
            result = await self.store.delete(item.url)
            _log_cleanup(result)
        await self.db.delete(item)
        return result

    async def delete(self, item: CourseFile) -> CleanupResult | None:
        result = await self._remove(item)
        await self.db.commit()
        return result

    async def delete_for_course(self, course_name: str) -> list[CleanupResult]:
        """Delete every record for a course. The caller commits."""
        results: list[CleanupResult] = []
        for item in await self.list_for_course(course_name):
            result = await self._remove(item)
            if result is not None:
                results.append(result)
        return results


class CourseRegistry:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_all(self) -> list[Course]:
        res = await self.db.execute(select(Course).order_by(Course.created_at))
        return list(res.scalars().all())

    async def get(self, course_id: UUID) -> Course | None:
        res = await self.db.execute(select(Course).where(Course.id == course_id))
        return res.scalar_one_or_none()

    async def find_by_name(self, name: str) -> Course | None:
        # `first()` rather than `scalar_one_or_none()`: nothing in storage stops duplicates.
        res = await self.db.execute(select(Course).where(Course.name == name).limit(1))
        return res.scalars().first()

    async def add(self, name: str) -> Course:
        course = Course(name=name)
        self.db.add(course)
        await self.db.commit()
        await self.db.refresh(course)
        return course

    async def get_or_create(self, name: str) -> Course:
        course = await self.find_by_name(name)
        if course is not None:
            return course
        logger.info("Creating course %r on first file reference", name)
        return await self.add(name)

    async def delete(self, course: Course, files: FileRegistry) -> list[CleanupResult]:
        """
        Delete a course and every file record that names it.

        All record deletions share one transaction. Stored objects are removed
        as their records are visited and are not restored if the commit fails.
        """
        results = await files.delete_for_course(course.name)
        await self.db.delete(course)
        await self.db.commit()
        return results
