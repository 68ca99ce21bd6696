"""Errors raised by the task store.

Callers can tell "bad input" (ValidationError and its InvalidReferenceError
subclass) apart from "already gone" (NotFoundError) and from an unreachable
store (StoreConnectionError).
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Violation:
    """A single broken field constraint.

    Attributes:
        field: Name of the offending field (camelCase, as seen by callers)
        constraint: Short constraint key, e.g. "required", "max_length", "unique"
        message: Human readable explanation
    """
    field: str
    constraint: str
    message: str


class TimeLeftError(Exception):
    """Base class for every error raised by timeleft."""


class ValidationError(TimeLeftError):
    """One or more fields failed their constraints."""

    def __init__(self, violations: List[Violation]):
        self.violations = list(violations)
        super().__init__("; ".join(f"{v.field}: {v.message}" for v in self.violations))

    @property
    def field(self) -> Optional[str]:
        return self.violations[0].field if self.violations else None

    @property
    def constraint(self) -> Optional[str]:
        return self.violations[0].constraint if self.violations else None


class InvalidReferenceError(ValidationError):
    """A supplied groupId does not resolve to an existing task group."""

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__([Violation("groupId", "reference", "Invalid task group")])


class NotFoundError(TimeLeftError):
    """The target record of an operation does not exist."""

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} not found: {record_id}")


class StoreConnectionError(TimeLeftError, ConnectionError):
    """The task store could not be reached."""
