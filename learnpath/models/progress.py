from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ProgressStatus = Literal["NotStarted", "InProgress", "Completed"]
ItemState = Literal["Locked", "Unlocked", "Completed"]


@dataclass(frozen=True, slots=True)
class ProgressRecord:
    """A learner's progress through one course.

    Derived fields (status, percent_complete) are recomputed from the
    completion set on every write; see services.progression.compute_record.
    """

    completed_item_ids: frozenset[str] = field(default_factory=frozenset)
    status: ProgressStatus = "NotStarted"
    percent_complete: int = 0
    last_updated: int | None = None

    @staticmethod
    def new() -> ProgressRecord:
        return ProgressRecord()

    @property
    def is_completed(self) -> bool:
        return self.status == "Completed"


@dataclass(frozen=True, slots=True)
class CourseComplete:
    """Returned by ``advance`` when there is no next unlocked item."""


COURSE_COMPLETE = CourseComplete()
