"""Paginated user list state machine."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from arrogance_admin.domain.models import UserPage, UserRecord
from arrogance_admin.errors import FetchError
from arrogance_admin.services.pagination import PageCursorTracker

_logger = logging.getLogger(__name__)


class RemoteListSource(Protocol):
    """Interface for enumerating users page by page."""

    async def fetch(self, page_size: int, page_token: str | None) -> UserPage:
        """Return the page of users that follows ``page_token``."""


class ListPhase(Enum):
    """Phases of the user list controller."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ListCommand(Enum):
    """Navigation commands accepted by the user list."""

    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    NEXT_PAGE = "next_page"
    PREV_PAGE = "prev_page"
    SELECT = "select"
    RELOAD = "reload"


@dataclass
class ListViewState:
    """Render-ready state of the user list."""

    users: list[UserRecord] = field(default_factory=list)
    cursor: int = 0
    current_page: int = 0
    has_next_page: bool = False
    phase: ListPhase = ListPhase.IDLE
    error: str | None = None

    @property
    def loading(self) -> bool:
        """Return whether a fetch is in flight."""
        return self.phase is ListPhase.LOADING

    @property
    def selected(self) -> UserRecord | None:
        """Return the user under the cursor, if any."""
        if not self.users:
            return None
        return self.users[self.cursor]


@dataclass
class UserListController:
    """Owns the paginated list and serializes fetches.

    Commands received while a fetch is in flight are ignored, so at most one
    fetch is outstanding and ``current_page`` always matches the page being
    loaded.
    """

    source: RemoteListSource
    page_size: int = 3
    state: ListViewState = field(default_factory=ListViewState)
    tracker: PageCursorTracker = field(default_factory=PageCursorTracker)
    listeners: list[Callable[[ListViewState], None]] = field(default_factory=list)
    _generation: int = field(default=0, init=False, repr=False)
    _alive: bool = field(default=True, init=False, repr=False)
    _pending: asyncio.Task | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")

    def mount(self) -> None:
        """Start loading the first page."""
        if self.state.phase is not ListPhase.IDLE:
            return
        self._start_load(None)

    def unmount(self) -> None:
        """Discard the controller; late fetch results are dropped."""
        self._alive = False
        self._generation += 1
        self.listeners.clear()

    def dispatch(self, command: ListCommand) -> UserRecord | None:
        """Apply a navigation command and return the selected user, if any."""
        if not self._alive or self.state.phase in {ListPhase.IDLE, ListPhase.LOADING}:
            return None
        handler = self._handlers()[command]
        return handler()

    async def wait_idle(self) -> None:
        """Wait for the outstanding fetch, if any, to complete."""
        if self._pending is not None:
            await self._pending

    def _handlers(self) -> dict[ListCommand, Callable[[], UserRecord | None]]:
        return {
            ListCommand.MOVE_DOWN: self._move_down,
            ListCommand.MOVE_UP: self._move_up,
            ListCommand.NEXT_PAGE: self._next_page,
            ListCommand.PREV_PAGE: self._prev_page,
            ListCommand.SELECT: self._select,
            ListCommand.RELOAD: self._reload,
        }

    def _move_down(self) -> None:
        if self.state.users:
            self.state.cursor = min(self.state.cursor + 1, len(self.state.users) - 1)
            self._notify()

    def _move_up(self) -> None:
        if self.state.users:
            self.state.cursor = max(self.state.cursor - 1, 0)
            self._notify()

    def _select(self) -> UserRecord | None:
        return self.state.selected

    def _next_page(self) -> None:
        if not self.state.has_next_page or not self.state.users:
            return
        token = self.state.users[-1].id
        self.tracker.record_token(self.state.current_page + 1, token)
        shown_page = self.state.current_page
        self.state.current_page += 1
        self.state.cursor = 0
        self._start_load(token, shown_page)

    def _prev_page(self) -> None:
        if self.state.current_page <= 0:
            return
        token = self.tracker.token_for(self.state.current_page - 1)
        shown_page = self.state.current_page
        self.state.current_page -= 1
        self.state.cursor = 0
        self._start_load(token, shown_page)

    def _reload(self) -> None:
        page = self.state.current_page
        self._start_load(self.tracker.token_for(page), page)

    def _start_load(self, token: str | None, shown_page: int = 0) -> None:
        self.state.phase = ListPhase.LOADING
        self._generation += 1
        self._notify()
        self._pending = asyncio.create_task(
            self._load(token, shown_page, self._generation)
        )

    async def _load(self, token: str | None, shown_page: int, generation: int) -> None:
        try:
            page = await self.source.fetch(self.page_size, token)
        except Exception as exc:
            if generation != self._generation:
                return
            _logger.warning(
                "User list fetch failed (page=%s): %s", self.state.current_page, exc
            )
            error = FetchError(f"Failed to load users: {exc}")
            # Rows on screen still belong to the page that was shown.
            self.state.current_page = shown_page
            self.state.phase = ListPhase.ERROR
            self.state.error = str(error)
            self._clamp_cursor()
            self._notify()
            return
        if generation != self._generation:
            return
        self.state.users = list(page.users)
        self.state.has_next_page = page.next_page_token is not None
        self.state.cursor = 0
        self.state.error = None
        self.state.phase = ListPhase.READY
        self._notify()

    def _clamp_cursor(self) -> None:
        if not self.state.users:
            self.state.cursor = 0
            return
        self.state.cursor = max(0, min(self.state.cursor, len(self.state.users) - 1))

    def _notify(self) -> None:
        for listener in list(self.listeners):
            listener(self.state)
