from __future__ import annotations

from typing import Protocol

from learnpath.models.progress import ProgressRecord


class ProgressRepo(Protocol):
    """Storage adapter for per-learner, per-course progress records.

    ``save`` returns the record as stored, so callers never need to
    re-read after a write.
    """

    async def get(self, learner_id: str, course_id: str) -> ProgressRecord | None: ...
    async def save(
        self, learner_id: str, course_id: str, record: ProgressRecord
    ) -> ProgressRecord: ...
    async def delete(self, learner_id: str, course_id: str) -> None: ...
    async def list_for_learner(self, learner_id: str) -> dict[str, ProgressRecord]: ...


class InMemoryProgressRepo:
    def __init__(self) -> None:
        self._store: dict[tuple[str, str], ProgressRecord] = {}

    async def get(self, learner_id: str, course_id: str) -> ProgressRecord | None:
        return self._store.get((learner_id, course_id))

    async def save(
        self, learner_id: str, course_id: str, record: ProgressRecord
    ) -> ProgressRecord:
        # Last write wins; a learner is the only writer of their own record.
        self._store[(learner_id, course_id)] = record
        return record

    async def delete(self, learner_id: str, course_id: str) -> None:
        self._store.pop((learner_id, course_id), None)

    async def list_for_learner(self, learner_id: str) -> dict[str, ProgressRecord]:
        return {
            course_id: record
            for (owner, course_id), record in self._store.items()
            if owner == learner_id
        }
