"""Learner course-player endpoints.

Every route acts on the caller's own progress: the learner id is the
``sub`` of the bearer token, never a path or body parameter.

  POST /v1/learn/{course_id}/open                          resume point
  GET  /v1/learn/{course_id}/progress                      stored record
  POST /v1/learn/{course_id}/lessons/{item_id}/complete    mark lesson read
  POST /v1/learn/{course_id}/quizzes/{item_id}/attempts    grade + maybe complete
  POST /v1/learn/{course_id}/navigate                      lock-checked jump
  POST /v1/learn/{course_id}/advance                       next item or done
  GET  /v1/learn/overall                                   across all courses
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from learnpath.api.dependencies import get_tracker, require_user, to_http_error
from learnpath.models.principal import Principal
from learnpath.models.progress import CourseComplete, ProgressRecord
from learnpath.services.errors import ProgressError
from learnpath.services.tracker import CourseSession, ProgressTracker

router = APIRouter(prefix="/v1/learn", tags=["learn"])


class ProgressOut(BaseModel):
    completed_item_ids: list[str]
    status: str
    percent_complete: int
    last_updated: int | None = None

    @classmethod
    def from_record(cls, record: ProgressRecord) -> ProgressOut:
        return cls(
            completed_item_ids=sorted(record.completed_item_ids),
            status=record.status,
            percent_complete=record.percent_complete,
            last_updated=record.last_updated,
        )


class OutlineItemOut(BaseModel):
    index: int
    id: str
    type: str
    title: str
    state: str


class CourseSessionOut(BaseModel):
    course_id: str
    title: str
    current_index: int
    items: list[OutlineItemOut]
    progress: ProgressOut

    @classmethod
    def from_session(cls, session: CourseSession) -> CourseSessionOut:
        return cls(
            course_id=session.course.id,
            title=session.course.title,
            current_index=session.current_index,
            items=[
                OutlineItemOut(
                    index=i, id=item.id, type=item.type, title=item.title, state=state
                )
                for i, (item, state) in enumerate(
                    zip(session.course.items, session.states, strict=True)
                )
            ],
            progress=ProgressOut.from_record(session.record),
        )


class QuizAttemptIn(BaseModel):
    # question id -> chosen option, or list of options for multiple-select
    answers: dict[str, str | list[str]] = Field(default_factory=dict)


class QuizAttemptOut(BaseModel):
    score: int
    passed: bool
    incorrect_questions: list[int]
    progress: ProgressOut


class NavigateIn(BaseModel):
    target_index: int
    current_index: int | None = None


class NavigateOut(BaseModel):
    index: int


class AdvanceIn(BaseModel):
    current_index: int


class AdvanceOut(BaseModel):
    next_index: int | None
    course_complete: bool


class OverallOut(BaseModel):
    percent_complete: int


Tracker = Annotated[ProgressTracker, Depends(get_tracker)]
Learner = Annotated[Principal, Depends(require_user)]


@router.get("/overall", response_model=OverallOut)
async def get_overall_progress(principal: Learner, tracker: Tracker) -> OverallOut:
    percent = await tracker.overall_progress(principal.user_id)
    return OverallOut(percent_complete=percent)


@router.post("/{course_id}/open", response_model=CourseSessionOut)
async def open_course(
    course_id: str, principal: Learner, tracker: Tracker
) -> CourseSessionOut:
    try:
        session = await tracker.open_course(principal.user_id, course_id)
    except ProgressError as exc:
        raise to_http_error(exc) from None
    return CourseSessionOut.from_session(session)


@router.get("/{course_id}/progress", response_model=ProgressOut)
async def get_progress(
    course_id: str, principal: Learner, tracker: Tracker
) -> ProgressOut:
    try:
        record = await tracker.get_progress(principal.user_id, course_id)
    except ProgressError as exc:
        raise to_http_error(exc) from None
    return ProgressOut.from_record(record)


@router.post("/{course_id}/lessons/{item_id}/complete", response_model=ProgressOut)
async def complete_lesson(
    course_id: str, item_id: str, principal: Learner, tracker: Tracker
) -> ProgressOut:
    try:
        record = await tracker.mark_lesson_complete(
            principal.user_id, course_id, item_id
        )
    except ProgressError as exc:
        raise to_http_error(exc) from None
    return ProgressOut.from_record(record)


@router.post(
    "/{course_id}/quizzes/{item_id}/attempts", response_model=QuizAttemptOut
)
async def submit_quiz_attempt(
    course_id: str,
    item_id: str,
    body: QuizAttemptIn,
    principal: Learner,
    tracker: Tracker,
) -> QuizAttemptOut:
    try:
        outcome = await tracker.submit_quiz(
            principal.user_id, course_id, item_id, body.answers
        )
    except ProgressError as exc:
        raise to_http_error(exc) from None
    return QuizAttemptOut(
        score=outcome.result.score,
        passed=outcome.result.passed,
        incorrect_questions=list(outcome.result.incorrect_questions),
        progress=ProgressOut.from_record(outcome.record),
    )


@router.post("/{course_id}/navigate", response_model=NavigateOut)
async def navigate(
    course_id: str, body: NavigateIn, principal: Learner, tracker: Tracker
) -> NavigateOut:
    try:
        index = await tracker.navigate(
            principal.user_id, course_id, body.target_index, body.current_index
        )
    except ProgressError as exc:
        raise to_http_error(exc) from None
    return NavigateOut(index=index)


@router.post("/{course_id}/advance", response_model=AdvanceOut)
async def advance(
    course_id: str, body: AdvanceIn, principal: Learner, tracker: Tracker
) -> AdvanceOut:
    try:
        nxt = await tracker.advance(principal.user_id, course_id, body.current_index)
    except ProgressError as exc:
        raise to_http_error(exc) from None
    if isinstance(nxt, CourseComplete):
        return AdvanceOut(next_index=None, course_complete=True)
    return AdvanceOut(next_index=nxt, course_complete=False)
