"""Progress tracker: applies completion events to stored progress records.

The lock/unlock rules live in services.progression and are pure.  This
module adds the collaborators around them:

  CourseRepo / QuizRepo  - read-only curriculum and quiz content
  ProgressRepo           - storage adapter for ProgressRecord

Each completion event is one read-modify-write: load the record, derive
the new record, save it, and return what the store returned.  Storage
errors are not retried; they propagate to the caller unchanged.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from learnpath.core.metrics import (
    COURSES_COMPLETED,
    ITEM_COMPLETIONS,
    LOCKED_REJECTIONS,
    QUIZ_ATTEMPTS,
)
from learnpath.models.course import Course, CurriculumItem
from learnpath.models.progress import CourseComplete, ItemState, ProgressRecord
from learnpath.repos.course_repo import CourseRepo
from learnpath.repos.progress_repo import ProgressRepo
from learnpath.repos.quiz_repo import QuizRepo
from learnpath.services import progression
from learnpath.services.errors import ItemTypeError, LockedError, NotFoundError
from learnpath.services.quiz_grading import Answer, QuizResult, grade_quiz

logger = logging.getLogger(__name__)


def _utc_now() -> int:
    return int(datetime.datetime.now(datetime.UTC).timestamp())


@dataclass(frozen=True, slots=True)
class CourseSession:
    """What a learner sees on opening a course."""

    course: Course
    record: ProgressRecord
    states: tuple[ItemState, ...]
    current_index: int


@dataclass(frozen=True, slots=True)
class QuizAttemptOutcome:
    result: QuizResult
    record: ProgressRecord


def _session(course: Course, record: ProgressRecord) -> CourseSession:
    completed = record.completed_item_ids
    return CourseSession(
        course=course,
        record=record,
        states=tuple(progression.item_states(course.items, completed)),
        current_index=progression.select_initial_item(course.items, completed),
    )


class ProgressTracker:
    def __init__(
        self,
        courses: CourseRepo,
        quizzes: QuizRepo,
        progress: ProgressRepo,
        clock: Callable[[], int] = _utc_now,
    ) -> None:
        self._courses = courses
        self._quizzes = quizzes
        self._progress = progress
        self._clock = clock

    # -- lookups -----------------------------------------------------------

    async def _require_course(self, course_id: str) -> Course:
        course = await self._courses.get(course_id)
        if course is None:
            raise NotFoundError(f"course {course_id!r} not found")
        return course

    @staticmethod
    def _require_item(course: Course, item_id: str) -> tuple[int, CurriculumItem]:
        index = course.index_of(item_id)
        if index is None:
            raise NotFoundError(
                f"item {item_id!r} is not part of course {course.id!r}"
            )
        return index, course.items[index]

    async def _load(self, learner_id: str, course_id: str) -> ProgressRecord:
        record = await self._progress.get(learner_id, course_id)
        return record if record is not None else ProgressRecord.new()

    # -- reads -------------------------------------------------------------

    async def get_progress(self, learner_id: str, course_id: str) -> ProgressRecord:
        await self._require_course(course_id)
        record = await self._progress.get(learner_id, course_id)
        if record is None:
            raise NotFoundError(
                f"no progress for learner {learner_id!r} in course {course_id!r}"
            )
        return record

    async def list_progress(self, learner_id: str) -> dict[str, ProgressRecord]:
        return await self._progress.list_for_learner(learner_id)

    async def open_course(self, learner_id: str, course_id: str) -> CourseSession:
        """Load (or create on first access) the record and pick the resume point."""
        course = await self._require_course(course_id)
        record = await self._progress.get(learner_id, course_id)
        if record is None:
            record = await self._progress.save(
                learner_id,
                course_id,
                progression.compute_record(course.items, (), self._clock()),
            )
            logger.info(
                "Progress record created learner=%s course=%s",
                learner_id,
                course_id,
            )
        return _session(course, record)

    async def course_outline(self, learner_id: str, course_id: str) -> CourseSession:
        """Same view as open_course, but read-only: no record is created."""
        course = await self._require_course(course_id)
        return _session(course, await self._load(learner_id, course_id))

    async def navigate(
        self,
        learner_id: str,
        course_id: str,
        target_index: int,
        current_index: int | None = None,
    ) -> int:
        course = await self._require_course(course_id)
        record = await self._load(learner_id, course_id)
        completed = record.completed_item_ids
        # The client reports its position; a locked position grants nothing.
        if current_index is not None and not (
            0 <= current_index < len(course.items)
            and progression.item_state(course.items, completed, current_index)
            != "Locked"
        ):
            current_index = None
        try:
            return progression.select_item(
                course.items, completed, target_index, current_index
            )
        except LockedError:
            LOCKED_REJECTIONS.labels(operation="navigate").inc()
            logger.info(
                "Navigation to locked item rejected learner=%s course=%s index=%d",
                learner_id,
                course_id,
                target_index,
            )
            raise

    async def advance(
        self, learner_id: str, course_id: str, current_index: int
    ) -> int | CourseComplete:
        course = await self._require_course(course_id)
        record = await self._load(learner_id, course_id)
        return progression.advance(
            current_index, course.items, record.completed_item_ids
        )

    # -- completion events ---------------------------------------------------

    async def complete_item(
        self, learner_id: str, course_id: str, item_id: str
    ) -> ProgressRecord:
        """Mark ``item_id`` completed.  Re-completing is a no-op (no write)."""
        course = await self._require_course(course_id)
        index, item = self._require_item(course, item_id)
        current = await self._load(learner_id, course_id)

        if item_id in current.completed_item_ids:
            logger.debug(
                "Item already completed learner=%s course=%s item=%s",
                learner_id,
                course_id,
                item_id,
            )
            return current

        if progression.is_locked(course.items, current.completed_item_ids, index):
            LOCKED_REJECTIONS.labels(operation="complete").inc()
            logger.warning(
                "Completion of locked item rejected learner=%s course=%s item=%s",
                learner_id,
                course_id,
                item_id,
            )
            raise LockedError(item_id, index)

        updated = progression.compute_record(
            course.items, current.completed_item_ids | {item_id}, self._clock()
        )
        saved = await self._progress.save(learner_id, course_id, updated)
        ITEM_COMPLETIONS.labels(item_type=item.type).inc()
        logger.info(
            "Item completed learner=%s course=%s item=%s percent=%d status=%s",
            learner_id,
            course_id,
            item_id,
            saved.percent_complete,
            saved.status,
            extra={
                "learner_id": learner_id,
                "course_id": course_id,
                "item_id": item_id,
            },
        )

        if saved.is_completed and not current.is_completed:
            COURSES_COMPLETED.inc()
            logger.info("Course completed learner=%s course=%s", learner_id, course_id)
        return saved

    async def mark_lesson_complete(
        self, learner_id: str, course_id: str, item_id: str
    ) -> ProgressRecord:
        course = await self._require_course(course_id)
        _, item = self._require_item(course, item_id)
        if item.type != "lesson":
            raise ItemTypeError(
                f"{item_id!r} is a {item.type}; submit a passing attempt instead"
            )
        return await self.complete_item(learner_id, course_id, item_id)

    async def submit_quiz(
        self,
        learner_id: str,
        course_id: str,
        item_id: str,
        answers: Mapping[str, Answer],
    ) -> QuizAttemptOutcome:
        """Grade an attempt; only a pass completes the quiz item.

        A failed attempt leaves the record untouched and performs no write.
        """
        course = await self._require_course(course_id)
        index, item = self._require_item(course, item_id)
        if item.type != "quiz":
            raise ItemTypeError(f"{item_id!r} is a {item.type}, not a quiz")

        quiz = await self._quizzes.get(item.entity_id)
        if quiz is None:
            raise NotFoundError(f"quiz {item.entity_id!r} not found")

        current = await self._load(learner_id, course_id)
        if item_id not in current.completed_item_ids and progression.is_locked(
            course.items, current.completed_item_ids, index
        ):
            LOCKED_REJECTIONS.labels(operation="complete").inc()
            raise LockedError(item_id, index)

        result = grade_quiz(quiz, answers)
        QUIZ_ATTEMPTS.labels(result="passed" if result.passed else "failed").inc()
        logger.info(
            "Quiz graded learner=%s course=%s item=%s score=%d passed=%s",
            learner_id,
            course_id,
            item_id,
            result.score,
            result.passed,
        )

        if not result.passed:
            return QuizAttemptOutcome(result=result, record=current)
        record = await self.complete_item(learner_id, course_id, item_id)
        return QuizAttemptOutcome(result=result, record=record)

    # -- assignment ----------------------------------------------------------

    async def assign_courses(
        self, learner_id: str, course_ids: Iterable[str]
    ) -> dict[str, ProgressRecord]:
        """Start tracking the given courses.  Existing records are kept."""
        courses = [
            await self._require_course(course_id)
            for course_id in dict.fromkeys(course_ids)
        ]
        existing = await self._progress.list_for_learner(learner_id)
        for course in courses:
            if course.id in existing:
                continue
            await self._progress.save(
                learner_id,
                course.id,
                progression.compute_record(course.items, (), self._clock()),
            )
            logger.info("Course assigned learner=%s course=%s", learner_id, course.id)
        return await self._progress.list_for_learner(learner_id)

    async def unassign_courses(
        self, learner_id: str, course_ids: Iterable[str]
    ) -> dict[str, ProgressRecord]:
        """Stop tracking the given courses and drop their progress."""
        existing = await self._progress.list_for_learner(learner_id)
        for course_id in dict.fromkeys(course_ids):
            if course_id not in existing:
                continue
            await self._progress.delete(learner_id, course_id)
            logger.info("Course unassigned learner=%s course=%s", learner_id, course_id)
        return await self._progress.list_for_learner(learner_id)

    async def overall_progress(self, learner_id: str) -> int:
        """Completed items over total items across all tracked courses."""
        total = 0
        done = 0
        records = await self._progress.list_for_learner(learner_id)
        for course_id, record in records.items():
            course = await self._courses.get(course_id)
            if course is None or not course.items:
                logger.warning(
                    "Skipping course without curriculum learner=%s course=%s",
                    learner_id,
                    course_id,
                )
                continue
            total += len(course.items)
            done += len(record.completed_item_ids & course.item_ids)
        if total == 0:
            return 0
        return (100 * done) // total
