"""User detail view state and deletion action."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from arrogance_admin.domain.deletion import DeletionReport
from arrogance_admin.domain.models import UserRecord
from arrogance_admin.domain.records import ChildRecord, DisplayItem, display_item
from arrogance_admin.errors import DeletionError, PartialLoadError
from arrogance_admin.services.deletion import CascadingDeletionProtocol
from arrogance_admin.services.records import (
    EXERCISES,
    HISTORIES,
    PROFILES,
    RemoteRecordStore,
)

_DETAIL_COLLECTIONS = (PROFILES, EXERCISES, HISTORIES)

_SECTION_TITLES = {
    PROFILES: "Profiles",
    EXERCISES: "Exercises",
    HISTORIES: "Histories",
}

INCONSISTENCY_WARNING = (
    "Some data may already be deleted. The user may now be in an inconsistent "
    "state; run the deletion again to finish it."
)

_logger = logging.getLogger(__name__)


class DetailStatus(Enum):
    """Display states of the user detail view."""

    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class DetailViewState:
    """Render-ready state of the user detail view."""

    user: UserRecord
    profiles: list[ChildRecord] = field(default_factory=list)
    exercises: list[ChildRecord] = field(default_factory=list)
    histories: list[ChildRecord] = field(default_factory=list)
    loading: bool = True
    deleting: bool = False
    error: str | None = None

    @property
    def status(self) -> DetailStatus:
        """Return the display state derived from the flags."""
        if self.loading:
            return DetailStatus.LOADING
        if self.error is not None and not self._has_data():
            return DetailStatus.ERROR
        if not self._has_data():
            return DetailStatus.EMPTY
        return DetailStatus.READY

    def sections(self) -> list[tuple[str, list[DisplayItem]]]:
        """Return non-empty display groups in a fixed order."""
        groups = []
        for collection in _DETAIL_COLLECTIONS:
            records = getattr(self, collection)
            if records:
                groups.append(
                    (_SECTION_TITLES[collection], [display_item(r) for r in records])
                )
        return groups

    def _has_data(self) -> bool:
        return bool(self.profiles or self.exercises or self.histories)


@dataclass
class UserDetailController:
    """Loads a user's documents and runs the deletion protocol."""

    store: RemoteRecordStore
    deletion: CascadingDeletionProtocol
    on_go_back: Callable[[], None] | None = None
    listeners: list[Callable[[DetailViewState], None]] = field(default_factory=list)
    state: DetailViewState | None = field(default=None, init=False)
    last_report: DeletionReport | None = field(default=None, init=False)
    _generation: int = field(default=0, init=False, repr=False)
    _pending: asyncio.Task | None = field(default=None, init=False, repr=False)

    def activate(self, user: UserRecord) -> None:
        """Start loading the detail view for ``user``."""
        self._generation += 1
        self.state = DetailViewState(user=user)
        self.last_report = None
        self._notify()
        self._pending = asyncio.create_task(self._load(user.id, self._generation))

    def deactivate(self) -> None:
        """Discard the current view; late results are dropped."""
        self._generation += 1
        self.state = None

    def request_delete(self) -> None:
        """Start the cascading deletion unless one is already running."""
        state = self.state
        if state is None or state.loading or state.deleting:
            return
        state.deleting = True
        state.error = None
        self._notify()
        self._pending = asyncio.create_task(
            self._delete(state.user.id, self._generation)
        )

    async def wait_idle(self) -> None:
        """Wait for the outstanding load or deletion, if any."""
        if self._pending is not None:
            await self._pending

    async def _load(self, user_id: str, generation: int) -> None:
        try:
            collections = await self._fetch_all(user_id)
        except PartialLoadError as exc:
            _logger.warning("Detail load failed: user_id=%s %s", user_id, exc)
            if generation != self._generation or self.state is None:
                return
            self.state.loading = False
            self.state.error = str(exc)
            self._notify()
            return
        if generation != self._generation or self.state is None:
            return
        self.state.loading = False
        self._apply(collections)
        self._notify()

    async def _fetch_all(self, user_id: str) -> dict[str, list[ChildRecord]]:
        results = await asyncio.gather(
            *(
                self.store.query_by_owner(collection, user_id)
                for collection in _DETAIL_COLLECTIONS
            ),
            return_exceptions=True,
        )
        failed = [
            collection
            for collection, result in zip(_DETAIL_COLLECTIONS, results, strict=True)
            if isinstance(result, BaseException)
        ]
        if failed:
            raise PartialLoadError(failed)
        return dict(zip(_DETAIL_COLLECTIONS, results, strict=True))

    def _apply(self, collections: dict[str, list[ChildRecord]]) -> None:
        if self.state is None:
            return
        for collection, records in collections.items():
            setattr(self.state, collection, list(records))

    async def _delete(self, user_id: str, generation: int) -> None:
        try:
            report = await self.deletion.run(user_id)
        except DeletionError as exc:
            _logger.exception("Cascading deletion failed: user_id=%s", user_id)
            if generation != self._generation or self.state is None:
                return
            self.state.deleting = False
            self.state.error = f"{exc}. {INCONSISTENCY_WARNING}"
            self._notify()
            await self._refresh_after_failure(user_id, generation)
            return
        if generation != self._generation or self.state is None:
            return
        self.last_report = report
        self._notify()
        if self.on_go_back is not None:
            self.on_go_back()

    async def _refresh_after_failure(self, user_id: str, generation: int) -> None:
        try:
            collections = await self._fetch_all(user_id)
        except PartialLoadError as exc:
            _logger.warning("Refresh after failed deletion failed: %s", exc)
            if generation != self._generation or self.state is None:
                return
            self.state.error = (
                f"{self.state.error} Could not refresh the data shown: {exc}"
            )
            self._notify()
            return
        if generation != self._generation or self.state is None:
            return
        self._apply(collections)
        self._notify()

    def _notify(self) -> None:
        if self.state is None:
            return
        for listener in list(self.listeners):
            listener(self.state)
