from __future__ import annotations


class ProgressError(Exception):
    """Base class for progression failures. All are recoverable by the caller."""


class NotFoundError(ProgressError):
    """The referenced course, item, quiz or progress record does not exist."""


class LockedError(ProgressError):
    """Access to an item whose predecessors are not all completed."""

    def __init__(self, item_id: str, index: int) -> None:
        super().__init__(f"item {item_id!r} at index {index} is locked")
        self.item_id = item_id
        self.index = index


class ItemTypeError(ProgressError):
    """A completion event that does not match the item's type."""
