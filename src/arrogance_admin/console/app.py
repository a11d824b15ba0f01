"""Console application routing keys to the active view."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from arrogance_admin.console.commands import Command, command_for
from arrogance_admin.console.modal import ConfirmModal, ModalResult
from arrogance_admin.console.render import render_detail, render_modal, render_users
from arrogance_admin.services.user_detail import UserDetailController
from arrogance_admin.services.users import ListCommand, UserListController

if TYPE_CHECKING:
    from arrogance_admin.containers import AppContainer

_logger = logging.getLogger(__name__)

_LIST_COMMANDS = {
    Command.MOVE_DOWN: ListCommand.MOVE_DOWN,
    Command.MOVE_UP: ListCommand.MOVE_UP,
    Command.NEXT_PAGE: ListCommand.NEXT_PAGE,
    Command.PREV_PAGE: ListCommand.PREV_PAGE,
    Command.SELECT: ListCommand.SELECT,
    Command.RELOAD: ListCommand.RELOAD,
}


class View(Enum):
    """Screens of the console."""

    USERS = "users"
    DETAIL = "detail"


@dataclass
class ConsoleApp:
    """Owns both controllers and the confirmation modal."""

    user_list: UserListController
    detail: UserDetailController
    view: View = View.USERS
    modal: ConfirmModal | None = None
    running: bool = True
    renderers: list[Callable[[str], None]] = field(default_factory=list)

    def start(self) -> None:
        """Wire controller notifications and load the first page."""
        self.user_list.listeners.append(lambda _state: self._on_change(View.USERS))
        self.detail.listeners.append(lambda _state: self._on_change(View.DETAIL))
        self.detail.on_go_back = self._after_delete
        self.user_list.mount()

    def stop(self) -> None:
        """Tear down controllers so late results are dropped."""
        self.running = False
        self.detail.deactivate()
        self.user_list.unmount()

    def handle_key(self, key: str) -> None:
        """Dispatch a single key press."""
        key = key.strip().lower()
        command = command_for(key)
        if command is Command.QUIT and (self.modal is None or key != "q"):
            self.stop()
            return
        if self.modal is not None:
            self._handle_modal(key)
        elif self.view is View.USERS:
            self._handle_users(command)
        else:
            self._handle_detail(command)
        self._render()

    async def wait_idle(self) -> None:
        """Wait for in-flight fetches in both views."""
        await self.detail.wait_idle()
        await self.user_list.wait_idle()

    def render(self) -> str:
        """Return the current screen as text."""
        if self.view is View.DETAIL and self.detail.state is not None:
            screen = render_detail(self.detail.state)
        else:
            screen = render_users(self.user_list.state)
        if self.modal is not None:
            screen = f"{screen}\n\n{render_modal(self.modal)}"
        return screen

    def go_back(self) -> None:
        """Return to the user list, discarding the detail view."""
        self.modal = None
        self.detail.deactivate()
        self.view = View.USERS

    def _handle_users(self, command: Command | None) -> None:
        list_command = _LIST_COMMANDS.get(command) if command else None
        if list_command is None:
            return
        selected = self.user_list.dispatch(list_command)
        if list_command is ListCommand.SELECT and selected is not None:
            self.view = View.DETAIL
            self.detail.activate(selected)

    def _handle_detail(self, command: Command | None) -> None:
        state = self.detail.state
        if command is Command.BACK:
            if state is not None and state.deleting:
                return
            self.go_back()
        elif command is Command.REQUEST_DELETE:
            if state is None or state.loading or state.deleting:
                return
            self.modal = ConfirmModal(
                title="Delete user",
                message=(
                    f"Delete {state.user.id} and all of its data? "
                    "This cannot be undone."
                ),
            )

    def _handle_modal(self, key: str) -> None:
        if self.modal is None:
            return
        result = self.modal.handle_key(key)
        if result is ModalResult.PENDING:
            return
        self.modal = None
        if result is ModalResult.CONFIRMED:
            self.detail.request_delete()

    def _after_delete(self) -> None:
        report = self.detail.last_report
        if report is not None:
            _logger.info(
                "User deleted: user_id=%s documents=%s",
                report.user_id,
                report.total_documents,
            )
        self.go_back()
        self.user_list.dispatch(ListCommand.RELOAD)

    def _on_change(self, view: View) -> None:
        if view is self.view:
            self._render()

    def _render(self) -> None:
        if not self.running:
            return
        screen = self.render()
        for renderer in list(self.renderers):
            renderer(screen)


def create_console(container: AppContainer) -> ConsoleApp:
    """Create a console app wired to the container's collaborators."""
    user_list = UserListController(
        source=container.list_source,
        page_size=container.settings.page_size,
    )
    detail = UserDetailController(
        store=container.record_store,
        deletion=container.deletion_protocol,
    )
    return ConsoleApp(user_list=user_list, detail=detail)
