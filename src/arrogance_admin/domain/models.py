"""Domain models for identity records."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the identity service."""

    id: str
    created_at: datetime | None = None
    last_login_at: datetime | None = None
    email: str | None = None


@dataclass(frozen=True)
class UserPage:
    """A bounded page of users returned by a list source."""

    users: list[UserRecord] = field(default_factory=list)
    next_page_token: str | None = None
