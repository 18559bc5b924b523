"""Admin endpoints: course assignment per learner.

Assigning a course creates a NotStarted progress record; unassigning
deletes the record.  Both are idempotent.
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from learnpath.api.dependencies import get_tracker, require_role, to_http_error
from learnpath.api.learn import ProgressOut
from learnpath.models.principal import Principal
from learnpath.models.progress import ProgressRecord
from learnpath.services.errors import ProgressError
from learnpath.services.tracker import ProgressTracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin", tags=["admin"])


class AssignmentIn(BaseModel):
    course_ids: list[str] = Field(min_length=1)
    action: Literal["assign", "unassign"] = "assign"


class LearnerProgressOut(BaseModel):
    learner_id: str
    overall_percent: int
    courses: dict[str, ProgressOut]


Admin = Annotated[Principal, Depends(require_role("admin"))]
Tracker = Annotated[ProgressTracker, Depends(get_tracker)]


async def _summary(
    tracker: ProgressTracker, learner_id: str, records: dict[str, ProgressRecord]
) -> LearnerProgressOut:
    return LearnerProgressOut(
        learner_id=learner_id,
        overall_percent=await tracker.overall_progress(learner_id),
        courses={cid: ProgressOut.from_record(r) for cid, r in records.items()},
    )


@router.post("/learners/{learner_id}/courses", response_model=LearnerProgressOut)
async def update_assignments(
    learner_id: str,
    body: AssignmentIn,
    principal: Admin,
    tracker: Tracker,
) -> LearnerProgressOut:
    logger.info(
        "Course %s by admin=%s learner=%s courses=%s",
        body.action,
        principal.user_id,
        learner_id,
        body.course_ids,
    )
    try:
        if body.action == "assign":
            records = await tracker.assign_courses(learner_id, body.course_ids)
        else:
            records = await tracker.unassign_courses(learner_id, body.course_ids)
    except ProgressError as exc:
        raise to_http_error(exc) from None
    return await _summary(tracker, learner_id, records)


@router.get("/learners/{learner_id}/progress", response_model=LearnerProgressOut)
async def get_learner_progress(
    learner_id: str,
    _principal: Admin,
    tracker: Tracker,
) -> LearnerProgressOut:
    records = await tracker.list_progress(learner_id)
    return await _summary(tracker, learner_id, records)
