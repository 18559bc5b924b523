"""Course catalog endpoints.

  GET /v1/courses              list courses
  GET /v1/courses/{course_id}  outline with the caller's per-item state

The outline is read-only: viewing it does not create a progress record.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from learnpath.api.dependencies import (
    course_repo,
    get_tracker,
    require_user,
    to_http_error,
)
from learnpath.api.learn import CourseSessionOut
from learnpath.models.principal import Principal
from learnpath.services.errors import ProgressError
from learnpath.services.tracker import ProgressTracker

router = APIRouter(prefix="/v1/courses", tags=["courses"])


class CourseOut(BaseModel):
    id: str
    title: str
    status: str
    item_count: int


@router.get("", response_model=list[CourseOut])
async def list_courses(
    _principal: Annotated[Principal, Depends(require_user)],
) -> list[CourseOut]:
    return [
        CourseOut(id=c.id, title=c.title, status=c.status, item_count=len(c.items))
        for c in await course_repo.list_all()
    ]


@router.get("/{course_id}", response_model=CourseSessionOut)
async def get_course_outline(
    course_id: str,
    principal: Annotated[Principal, Depends(require_user)],
    tracker: Annotated[ProgressTracker, Depends(get_tracker)],
) -> CourseSessionOut:
    try:
        session = await tracker.course_outline(principal.user_id, course_id)
    except ProgressError as exc:
        raise to_http_error(exc) from None
    return CourseSessionOut.from_session(session)
