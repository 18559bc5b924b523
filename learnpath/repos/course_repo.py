from __future__ import annotations

from typing import Protocol

from learnpath.models.course import Course, CurriculumItem


class CourseRepo(Protocol):
    async def get(self, course_id: str) -> Course | None: ...
    async def list_all(self) -> list[Course]: ...


class InMemoryCourseRepo:
    def __init__(self) -> None:
        self._by_id: dict[str, Course] = {}

    async def get(self, course_id: str) -> Course | None:
        return self._by_id.get(course_id)

    async def list_all(self) -> list[Course]:
        return list(self._by_id.values())

    def add(self, course: Course) -> None:
        if course.id in self._by_id:
            raise ValueError("course already exists")
        ids = [item.id for item in course.items]
        if len(ids) != len(set(ids)):
            raise ValueError("curriculum item ids must be unique")
        for item in course.items:
            type_, _ = CurriculumItem.parse_id(item.id)
            if type_ != item.type:
                raise ValueError(f"item {item.id!r} is not a {item.type}")
        self._by_id[course.id] = course


SAMPLE_COURSE = Course(
    id="intro-to-food-safety",
    title="Introduction to Food Safety",
    items=(
        CurriculumItem.new(type="lesson", entity_id="handwashing", title="Handwashing"),
        CurriculumItem.new(type="quiz", entity_id="hygiene", title="Hygiene Check"),
        CurriculumItem.new(
            type="lesson", entity_id="cold-storage", title="Cold Storage"
        ),
    ),
)


def seed_sample_course(repo: InMemoryCourseRepo) -> None:
    """Seed a sample course for development/testing."""
    if SAMPLE_COURSE.id not in repo._by_id:
        repo.add(SAMPLE_COURSE)
