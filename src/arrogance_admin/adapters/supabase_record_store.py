"""Supabase-backed document store for user-owned collections."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from supabase import AuthApiError

from arrogance_admin.adapters.supabase_client import SupabaseClientProvider
from arrogance_admin.adapters.supabase_rows import parse_timestamp
from arrogance_admin.domain.records import (
    ChildRecord,
    Exercise,
    History,
    Profile,
    ProfileRecord,
    Routine,
    Workout,
)
from arrogance_admin.services.records import (
    EXERCISES,
    HISTORIES,
    PROFILE_RECORDS,
    PROFILES,
    ROUTINES,
    RemoteRecordStore,
)

# Nested collections are flat tables keyed by the parent id.
_SUBCOLLECTION_TABLES: dict[tuple[str, str], tuple[str, str]] = {
    (PROFILES, PROFILE_RECORDS): ("profile_records", "profile_id"),
}

_NOT_FOUND = 404

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseRecordStore(RemoteRecordStore):
    """Supabase implementation for per-user documents and identity removal."""

    provider: SupabaseClientProvider
    users_table: str = "users"

    async def query_by_owner(
        self, collection: str, owner_id: str
    ) -> list[ChildRecord]:
        """Return documents in a collection owned by ``owner_id``."""
        parser = _parser_for(collection)
        client = await self.provider.get()
        response = (
            await client.table(collection)
            .select("*")
            .eq("uid", owner_id)
            .order("created_at")
            .execute()
        )
        return [parser(row) for row in response.data or []]

    async def batch_delete(self, collection: str, document_ids: set[str]) -> None:
        """Delete documents by id in a single request."""
        if not document_ids:
            return
        client = await self.provider.get()
        await (
            client.table(collection)
            .delete()
            .in_("id", sorted(document_ids))
            .execute()
        )

    async def query_subcollection(
        self, collection: str, parent_id: str, subcollection: str
    ) -> list[ProfileRecord]:
        """Return nested documents for a parent document."""
        table, parent_column = _subcollection_table(collection, subcollection)
        client = await self.provider.get()
        response = (
            await client.table(table)
            .select("id, profile_id, created_at")
            .eq(parent_column, parent_id)
            .execute()
        )
        return [
            ProfileRecord(
                id=str(row["id"]),
                profile_id=str(row.get("profile_id") or parent_id),
                created_at=parse_timestamp(row.get("created_at")),
            )
            for row in response.data or []
        ]

    async def batch_delete_subcollection(
        self,
        collection: str,
        parent_id: str,
        subcollection: str,
        document_ids: set[str],
    ) -> None:
        """Delete nested documents under a parent in a single request."""
        if not document_ids:
            return
        table, parent_column = _subcollection_table(collection, subcollection)
        client = await self.provider.get()
        await (
            client.table(table)
            .delete()
            .eq(parent_column, parent_id)
            .in_("id", sorted(document_ids))
            .execute()
        )

    async def delete_owner_record(self, owner_id: str) -> bool:
        """Delete the auth user and its row in the users table.

        Returns False when neither existed. The users row is removed last so
        a run that fails on the auth user leaves the user listed for a retry.
        """
        client = await self.provider.get()
        auth_deleted = True
        try:
            await client.auth.admin.delete_user(owner_id)
        except AuthApiError as exc:
            if exc.status != _NOT_FOUND:
                raise
            _logger.info("Auth user not found: user_id=%s", owner_id)
            auth_deleted = False
        response = (
            await client.table(self.users_table)
            .delete()
            .eq("id", owner_id)
            .execute()
        )
        return auth_deleted or bool(response.data)


def _subcollection_table(collection: str, subcollection: str) -> tuple[str, str]:
    try:
        return _SUBCOLLECTION_TABLES[(collection, subcollection)]
    except KeyError:
        raise ValueError(f"Unknown subcollection {collection}/{subcollection}") from None


def _parser_for(collection: str) -> Callable[[dict[str, object]], ChildRecord]:
    parsers: dict[str, Callable[[dict[str, object]], ChildRecord]] = {
        PROFILES: _parse_profile,
        EXERCISES: _parse_exercise,
        HISTORIES: _parse_history,
        ROUTINES: _parse_routine,
    }
    try:
        return parsers[collection]
    except KeyError:
        raise ValueError(f"Unknown collection {collection}") from None


def _parse_profile(row: dict[str, object]) -> Profile:
    return Profile(
        id=str(row["id"]),
        uid=str(row["uid"]),
        name=str(row.get("name") or ""),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def _parse_exercise(row: dict[str, object]) -> Exercise:
    return Exercise(
        id=str(row["id"]),
        uid=str(row["uid"]),
        name=str(row.get("name") or ""),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def _parse_routine(row: dict[str, object]) -> Routine:
    return Routine(
        id=str(row["id"]),
        uid=str(row["uid"]),
        name=str(row.get("name") or ""),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def _parse_history(row: dict[str, object]) -> History:
    workout = row.get("workout")
    if not isinstance(workout, dict):
        workout = {}
    return History(
        id=str(row["id"]),
        uid=str(row["uid"]),
        workout=Workout(
            name=str(workout.get("name") or ""),
            date=parse_timestamp(workout.get("date")),
        ),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
