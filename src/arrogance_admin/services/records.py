"""Document store interface for records owned by a user."""

from typing import Protocol

from arrogance_admin.domain.records import ChildRecord, ProfileRecord

PROFILES = "profiles"
EXERCISES = "exercises"
HISTORIES = "histories"
ROUTINES = "routines"
PROFILE_RECORDS = "records"


class RemoteRecordStore(Protocol):
    """Persistence interface for per-user collections."""

    async def query_by_owner(
        self, collection: str, owner_id: str
    ) -> list[ChildRecord]:
        """Return documents in ``collection`` whose uid matches ``owner_id``."""

    async def batch_delete(self, collection: str, document_ids: set[str]) -> None:
        """Delete the given documents from ``collection`` in one commit."""

    async def query_subcollection(
        self, collection: str, parent_id: str, subcollection: str
    ) -> list[ProfileRecord]:
        """Return documents nested under a parent document."""

    async def batch_delete_subcollection(
        self,
        collection: str,
        parent_id: str,
        subcollection: str,
        document_ids: set[str],
    ) -> None:
        """Delete nested documents under a parent document in one commit."""

    async def delete_owner_record(self, owner_id: str) -> bool:
        """Delete the identity record; return False if it no longer exists."""
