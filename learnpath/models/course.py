from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ItemType = Literal["lesson", "quiz"]

ITEM_TYPES: tuple[str, ...] = ("lesson", "quiz")


@dataclass(frozen=True, slots=True)
class CurriculumItem:
    """One lesson or quiz in a course's ordered curriculum.

    The id is prefixed with the item type, e.g. ``lesson-intro`` or
    ``quiz-basics``, so the same entity id can appear once as a lesson
    and once as a quiz without colliding.
    """

    id: str
    type: ItemType
    title: str

    @property
    def entity_id(self) -> str:
        return self.id.split("-", 1)[1]

    @staticmethod
    def new(*, type: ItemType, entity_id: str, title: str) -> CurriculumItem:
        if type not in ITEM_TYPES:
            raise ValueError(f"item type must be lesson|quiz (got {type!r})")
        return CurriculumItem(id=f"{type}-{entity_id}", type=type, title=title)

    @staticmethod
    def parse_id(item_id: str) -> tuple[ItemType, str]:
        """Split ``<type>-<entityId>`` into its parts."""
        type_, sep, entity_id = item_id.partition("-")
        if not sep or not entity_id or type_ not in ITEM_TYPES:
            raise ValueError(f"malformed curriculum item id {item_id!r}")
        return type_, entity_id  # type: ignore[return-value]


@dataclass(frozen=True, slots=True)
class Course:
    id: str
    title: str
    items: tuple[CurriculumItem, ...] = ()
    status: str = "published"

    def index_of(self, item_id: str) -> int | None:
        for i, item in enumerate(self.items):
            if item.id == item_id:
                return i
        return None

    @property
    def item_ids(self) -> frozenset[str]:
        return frozenset(item.id for item in self.items)
