"""Curriculum progression rules.

Everything here is a pure function of the ordered curriculum and the
learner's completion set.  No storage, no clock reads: callers pass
``now`` explicitly where a timestamp is needed.

LOCKING RULE
-------------
An item at index i is unlocked iff i == 0 or every item at 0..i-1 has
been completed.  Completion never regresses, so once an item unlocks it
stays unlocked.

  [lesson-a]  [quiz-b]  [lesson-c]
   Unlocked    Locked    Locked        completed = {}
   Completed   Unlocked  Locked        completed = {lesson-a}
   Completed   Completed Unlocked      completed = {lesson-a, quiz-b}
"""

from __future__ import annotations

from collections.abc import Collection, Sequence

from learnpath.models.course import CurriculumItem
from learnpath.models.progress import (
    COURSE_COMPLETE,
    CourseComplete,
    ItemState,
    ProgressRecord,
    ProgressStatus,
)
from learnpath.services.errors import LockedError, NotFoundError


def _check_index(items: Sequence[CurriculumItem], index: int) -> None:
    if not 0 <= index < len(items):
        raise NotFoundError(f"no curriculum item at index {index}")


def is_locked(
    items: Sequence[CurriculumItem], completed_ids: Collection[str], index: int
) -> bool:
    _check_index(items, index)
    return any(item.id not in completed_ids for item in items[:index])


def is_course_complete(
    items: Sequence[CurriculumItem], completed_ids: Collection[str]
) -> bool:
    # An empty curriculum is never "complete": there is nothing to finish.
    return bool(items) and all(item.id in completed_ids for item in items)


def select_initial_item(
    items: Sequence[CurriculumItem], completed_ids: Collection[str]
) -> int:
    """Where a learner resumes: the first uncompleted item, or 0 for review."""
    if is_course_complete(items, completed_ids):
        return 0
    for i, item in enumerate(items):
        if item.id not in completed_ids:
            return i
    return 0


def advance(
    current_index: int,
    items: Sequence[CurriculumItem],
    completed_ids: Collection[str],
) -> int | CourseComplete:
    next_index = current_index + 1
    if next_index < len(items) and not is_locked(items, completed_ids, next_index):
        return next_index
    return COURSE_COMPLETE


def previous_item(current_index: int) -> int | None:
    return current_index - 1 if current_index > 0 else None


def select_item(
    items: Sequence[CurriculumItem],
    completed_ids: Collection[str],
    target_index: int,
    current_index: int | None = None,
) -> int:
    """Validate navigation to ``target_index``.

    Completed items and the current item are always reachable (review
    access).  Anything else must be unlocked.

    Raises NotFoundError for an out-of-range index and LockedError when
    the target is still locked.
    """
    _check_index(items, target_index)
    target = items[target_index]
    if target.id in completed_ids or target_index == current_index:
        return target_index
    if is_locked(items, completed_ids, target_index):
        raise LockedError(target.id, target_index)
    return target_index


def item_state(
    items: Sequence[CurriculumItem], completed_ids: Collection[str], index: int
) -> ItemState:
    _check_index(items, index)
    if items[index].id in completed_ids:
        return "Completed"
    if is_locked(items, completed_ids, index):
        return "Locked"
    return "Unlocked"


def item_states(
    items: Sequence[CurriculumItem], completed_ids: Collection[str]
) -> list[ItemState]:
    # Single pass: everything after the first gap is locked.
    states: list[ItemState] = []
    gap_seen = False
    for item in items:
        if item.id in completed_ids:
            states.append("Completed")
        elif gap_seen:
            states.append("Locked")
        else:
            states.append("Unlocked")
        if item.id not in completed_ids:
            gap_seen = True
    return states


def percent_complete(
    items: Sequence[CurriculumItem], completed_ids: Collection[str]
) -> int:
    if not items:
        return 0
    done = sum(1 for item in items if item.id in completed_ids)
    return (100 * done) // len(items)


def derive_status(
    items: Sequence[CurriculumItem], completed_ids: Collection[str]
) -> ProgressStatus:
    if is_course_complete(items, completed_ids):
        return "Completed"
    if any(item.id in completed_ids for item in items):
        return "InProgress"
    return "NotStarted"


def compute_record(
    items: Sequence[CurriculumItem],
    completed_ids: Collection[str],
    now: int | None = None,
) -> ProgressRecord:
    """Build a ProgressRecord whose derived fields satisfy the invariants.

    Ids that are not part of the curriculum are dropped so that
    completed_item_ids is always a subset of the course's items.
    """
    known = {item.id for item in items}
    completed = frozenset(i for i in completed_ids if i in known)
    return ProgressRecord(
        completed_item_ids=completed,
        status=derive_status(items, completed),
        percent_complete=percent_complete(items, completed),
        last_updated=now,
    )
