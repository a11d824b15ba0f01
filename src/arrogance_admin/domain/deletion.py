"""Domain models for cascading deletion."""

from dataclasses import dataclass, field


@dataclass
class DeletionReport:
    """Summary of what a cascading deletion removed."""

    user_id: str
    deleted: dict[str, int] = field(default_factory=dict)
    profile_records_deleted: int = 0
    identity_deleted: bool = False

    @property
    def total_documents(self) -> int:
        """Return the number of documents removed across collections."""
        return sum(self.deleted.values()) + self.profile_records_deleted
