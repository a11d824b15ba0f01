"""Shared test fixtures."""

import asyncio
from dataclasses import InitVar, dataclass, field
from datetime import UTC, datetime

import pytest

from arrogance_admin.config import Settings
from arrogance_admin.containers import AppContainer
from arrogance_admin.domain.models import UserPage, UserRecord
from arrogance_admin.domain.records import (
    ChildRecord,
    Exercise,
    History,
    Profile,
    ProfileRecord,
    Routine,
    Workout,
)
from arrogance_admin.services.deletion import CascadingDeletionProtocol
from arrogance_admin.services.records import (
    EXERCISES,
    HISTORIES,
    PROFILES,
    ROUTINES,
    RemoteRecordStore,
)
from arrogance_admin.services.users import RemoteListSource

CREATED_AT = datetime(2024, 3, 5, 14, 30, tzinfo=UTC)


def make_users(*ids: str) -> list[UserRecord]:
    return [UserRecord(id=user_id, created_at=CREATED_AT) for user_id in ids]


@dataclass
class InMemoryIdentities:
    """Identity records shared by the list source and the record store."""

    users: dict[str, UserRecord] = field(default_factory=dict)

    def add(self, user_id: str) -> None:
        self.users.setdefault(user_id, UserRecord(id=user_id, created_at=CREATED_AT))

    def remove(self, user_id: str) -> None:
        del self.users[user_id]

    def __contains__(self, user_id: object) -> bool:
        return user_id in self.users


@dataclass
class InMemoryUserListSource(RemoteListSource):
    """In-memory list source with keyset pagination on id."""

    identities: InMemoryIdentities = field(default_factory=InMemoryIdentities)
    users: InitVar[list[UserRecord] | None] = None
    calls: list[tuple[int, str | None]] = field(default_factory=list)
    failures: list[Exception] = field(default_factory=list)
    gate: asyncio.Event | None = None

    def __post_init__(self, users: list[UserRecord] | None) -> None:
        for user in users or []:
            self.identities.users[user.id] = user

    async def fetch(self, page_size: int, page_token: str | None) -> UserPage:
        self.calls.append((page_size, page_token))
        if self.gate is not None:
            await self.gate.wait()
        if self.failures:
            raise self.failures.pop(0)
        ordered = sorted(self.identities.users.values(), key=lambda user: user.id)
        if page_token is not None:
            ordered = [user for user in ordered if user.id > page_token]
        page = ordered[:page_size]
        next_token = page[-1].id if len(ordered) > page_size else None
        return UserPage(users=page, next_page_token=next_token)


@dataclass
class InMemoryRecordStore(RemoteRecordStore):
    """In-memory document store that records every call."""

    collections: dict[str, dict[str, ChildRecord]] = field(
        default_factory=lambda: {
            PROFILES: {},
            EXERCISES: {},
            HISTORIES: {},
            ROUTINES: {},
        }
    )
    profile_records: dict[str, dict[str, ProfileRecord]] = field(default_factory=dict)
    identities: InMemoryIdentities = field(default_factory=InMemoryIdentities)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)
    gate: asyncio.Event | None = None

    def add(self, collection: str, record: ChildRecord) -> None:
        self.collections[collection][record.id] = record

    def add_profile_record(self, record: ProfileRecord) -> None:
        self.profile_records.setdefault(record.profile_id, {})[record.id] = record

    async def _call(self, operation: str, target: str) -> None:
        self.calls.append((operation, target))
        if self.gate is not None:
            await self.gate.wait()
        failure = self.failures.get(f"{operation}:{target}")
        if failure is not None:
            raise failure

    async def query_by_owner(
        self, collection: str, owner_id: str
    ) -> list[ChildRecord]:
        await self._call("query", collection)
        return [
            record
            for record in self.collections[collection].values()
            if record.uid == owner_id
        ]

    async def batch_delete(self, collection: str, document_ids: set[str]) -> None:
        await self._call("batch_delete", collection)
        for document_id in document_ids:
            self.collections[collection].pop(document_id, None)

    async def query_subcollection(
        self, collection: str, parent_id: str, subcollection: str
    ) -> list[ProfileRecord]:
        await self._call("query", f"{collection}/{parent_id}/{subcollection}")
        return list(self.profile_records.get(parent_id, {}).values())

    async def batch_delete_subcollection(
        self,
        collection: str,
        parent_id: str,
        subcollection: str,
        document_ids: set[str],
    ) -> None:
        await self._call("batch_delete", f"{collection}/{parent_id}/{subcollection}")
        records = self.profile_records.get(parent_id, {})
        for document_id in document_ids:
            records.pop(document_id, None)

    async def delete_owner_record(self, owner_id: str) -> bool:
        await self._call("delete_owner", owner_id)
        if owner_id not in self.identities:
            return False
        self.identities.remove(owner_id)
        return True


def seed_user_data(store: InMemoryRecordStore, uid: str) -> None:
    """Give ``uid`` two profiles (one with records), one history, one routine."""
    store.identities.add(uid)
    store.add(PROFILES, Profile(id=f"{uid}-p1", uid=uid, name="Strength"))
    store.add(PROFILES, Profile(id=f"{uid}-p2", uid=uid, name="Cardio"))
    store.add(
        HISTORIES,
        History(id=f"{uid}-h1", uid=uid, workout=Workout(name="Leg day")),
    )
    store.add(ROUTINES, Routine(id=f"{uid}-r1", uid=uid, name="Push pull"))
    store.add_profile_record(ProfileRecord(id=f"{uid}-rec1", profile_id=f"{uid}-p1"))
    store.add_profile_record(ProfileRecord(id=f"{uid}-rec2", profile_id=f"{uid}-p1"))


def seed_exercise(store: InMemoryRecordStore, uid: str, name: str) -> None:
    store.add(EXERCISES, Exercise(id=f"{uid}-{name}", uid=uid, name=name))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        page_size=3,
    )


@pytest.fixture
def identities() -> InMemoryIdentities:
    return InMemoryIdentities()


@pytest.fixture
def list_source(identities: InMemoryIdentities) -> InMemoryUserListSource:
    return InMemoryUserListSource(
        identities=identities, users=make_users("A", "B", "C", "D", "E", "F", "G")
    )


@pytest.fixture
def record_store(identities: InMemoryIdentities) -> InMemoryRecordStore:
    return InMemoryRecordStore(identities=identities)


@pytest.fixture
def container(
    settings: Settings,
    list_source: InMemoryUserListSource,
    record_store: InMemoryRecordStore,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        list_source=list_source,
        record_store=record_store,
        deletion_protocol=CascadingDeletionProtocol(record_store),
        close_resources=close_resources,
    )
