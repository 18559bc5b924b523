"""SQLAlchemy table definitions.

These map to the frozen dataclass domain models in learnpath/models/.
Repos convert between SQLAlchemy rows and domain dataclasses.

Courses and quizzes are owned by the content service; only learner
progress is persisted here, keyed by the ids the content service issues.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from learnpath.db.engine import Base


class CourseProgressRow(Base):
    __tablename__ = "course_progress"

    learner_id: Mapped[str] = mapped_column(String(320), primary_key=True)
    course_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    completed_item_ids: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=[]
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="NotStarted"
    )  # NotStarted|InProgress|Completed
    percent_complete: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_updated: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
