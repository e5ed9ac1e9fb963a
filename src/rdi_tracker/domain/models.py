"""Domain models for the RDI tracker."""

from dataclasses import dataclass

from rdi_tracker.domain.rdi import Sex


@dataclass(frozen=True)
class UserRecord:
    """User profile as stored; attributes may be unset."""

    id: int
    age: int | None = None
    sex: Sex | None = None
    timezone: str | None = None
