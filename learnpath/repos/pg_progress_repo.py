"""PostgreSQL implementation of ProgressRepo."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.db.tables import CourseProgressRow
from learnpath.models.progress import ProgressRecord


class PgProgressRepo:
    """Satisfies the ProgressRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, learner_id: str, course_id: str) -> ProgressRecord | None:
        stmt = select(CourseProgressRow).where(
            CourseProgressRow.learner_id == learner_id,
            CourseProgressRow.course_id == course_id,
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_record(row)

    async def save(
        self, learner_id: str, course_id: str, record: ProgressRecord
    ) -> ProgressRecord:
        values = {
            "completed_item_ids": sorted(record.completed_item_ids),
            "status": record.status,
            "percent_complete": record.percent_complete,
            "last_updated": record.last_updated,
        }
        stmt = (
            insert(CourseProgressRow)
            .values(learner_id=learner_id, course_id=course_id, **values)
            .on_conflict_do_update(
                index_elements=["learner_id", "course_id"], set_=values
            )
            .returning(CourseProgressRow)
        )
        row = (await self._session.scalars(stmt)).one()
        return _row_to_record(row)

    async def delete(self, learner_id: str, course_id: str) -> None:
        stmt = delete(CourseProgressRow).where(
            CourseProgressRow.learner_id == learner_id,
            CourseProgressRow.course_id == course_id,
        )
        await self._session.execute(stmt)

    async def list_for_learner(self, learner_id: str) -> dict[str, ProgressRecord]:
        stmt = select(CourseProgressRow).where(
            CourseProgressRow.learner_id == learner_id
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return {row.course_id: _row_to_record(row) for row in rows}


def _row_to_record(row: CourseProgressRow) -> ProgressRecord:
    return ProgressRecord(
        completed_item_ids=frozenset(row.completed_item_ids or ()),
        status=row.status,  # type: ignore[arg-type]
        percent_complete=row.percent_complete,
        last_updated=row.last_updated,
    )
