"""
Exceptions raised by the import pipeline.

Validation errors abort an import before anything is written. A
PersistenceFailure means some categories may already be stored: sibling
branches are never rolled back.
"""

from __future__ import annotations

from typing import List, Optional, Tuple


class DataImportError(Exception):
    """Base class for every import error."""


class ValidationError(DataImportError):
    """A snapshot failed validation. Nothing has been persisted.

    Attributes:
        collection: Label of the collection the defect was found in
            (``"Channels"``, ``"Moderations"``...), if known.
        index: Position of the defective record inside that collection.
    """

    def __init__(self, message: str, *, collection: Optional[str] = None, index: Optional[int] = None) -> None:
        self.message = message
        self.collection = collection
        self.index = index
        super().__init__(self._render())

    def _render(self) -> str:
        if self.collection is None:
            return self.message
        if self.index is None:
            return f"{self.collection}: {self.message}"
        return f"{self.collection}[{self.index}]: {self.message}"

    def located(self, collection: str, index: Optional[int] = None) -> "ValidationError":
        """Return a copy of this error pointing at ``collection[index]``."""
        return type(self)(self.message, collection=collection, index=index)


class ShapeViolation(ValidationError, TypeError):
    """A snapshot field that must be a sequence is not one."""


class TypeMismatch(ValidationError, TypeError):
    """A record does not satisfy the field contract of its entity kind."""


class PersistenceFailure(DataImportError):
    """One or more import branches failed while writing.

    Branches that succeeded stay written.

    Attributes:
        failures: ``(category, exception)`` for every failed branch, in
            branch order.
    """

    def __init__(self, failures: List[Tuple[str, BaseException]]) -> None:
        self.failures = list(failures)
        categories = ", ".join(category for category, _ in self.failures)
        super().__init__(f"Import failed for: {categories}")

    @property
    def categories(self) -> List[str]:
        return [category for category, _ in self.failures]
