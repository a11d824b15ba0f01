"""Domain models for documents owned by a user."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Workout:
    """Workout summary embedded in a history entry."""

    name: str
    date: datetime | None = None


@dataclass(frozen=True)
class Profile:
    """A training profile owned by a user."""

    id: str
    uid: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Exercise:
    """A custom exercise owned by a user."""

    id: str
    uid: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class History:
    """A completed workout entry."""

    id: str
    uid: str
    workout: Workout
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Routine:
    """A saved routine owned by a user."""

    id: str
    uid: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ProfileRecord:
    """An entry in a profile's nested records collection."""

    id: str
    profile_id: str
    created_at: datetime | None = None


ChildRecord = Profile | Exercise | History | Routine


@dataclass(frozen=True)
class DisplayItem:
    """A render-ready row in the user detail view."""

    id: str
    label: str


def display_item(record: ChildRecord) -> DisplayItem:
    """Flatten a child record into an id/label pair."""
    if isinstance(record, History):
        return DisplayItem(id=record.id, label=record.workout.name)
    return DisplayItem(id=record.id, label=record.name)
