"""Plain-text rendering of view state."""

from datetime import datetime

from arrogance_admin.console.commands import Command, help_text
from arrogance_admin.console.modal import ConfirmModal
from arrogance_admin.services.user_detail import DetailStatus, DetailViewState
from arrogance_admin.services.users import ListPhase, ListViewState

TITLE = "Arrogance Admin"

_LIST_COMMANDS = [
    Command.MOVE_DOWN,
    Command.MOVE_UP,
    Command.NEXT_PAGE,
    Command.PREV_PAGE,
    Command.SELECT,
    Command.QUIT,
]
_DETAIL_COMMANDS = [Command.BACK, Command.REQUEST_DELETE, Command.QUIT]


def format_date(value: datetime | None) -> str:
    """Format a timestamp as ``d MMM, HH:mm`` or ``-`` when absent."""
    if value is None:
        return "-"
    return f"{value.day} {value:%b, %H:%M}"


def render_users(state: ListViewState) -> str:
    """Render the user list with cursor and page indicator."""
    lines = [TITLE, "", "Users", ""]
    if state.phase in {ListPhase.IDLE, ListPhase.LOADING}:
        lines.append("  Loading...")
    elif not state.users:
        lines.append("  No users found")
    else:
        for index, user in enumerate(state.users):
            marker = ">" if index == state.cursor else " "
            heading = f"{marker} {user.id}"
            if user.email:
                heading = f"{heading} ({user.email})"
            lines.append(heading)
            lines.append(f"    Created at: {format_date(user.created_at)}")
            lines.append(f"    Last login: {format_date(user.last_login_at)}")
    if state.error:
        lines.extend(["", f"  Error: {state.error}"])
    lines.append("")
    lines.append(_page_indicator(state))
    lines.append("")
    lines.append(help_text(_LIST_COMMANDS))
    return "\n".join(lines)


def render_detail(state: DetailViewState) -> str:
    """Render a user's documents grouped by collection."""
    lines = [TITLE, "", state.user.id, ""]
    status = state.status
    if status is DetailStatus.LOADING:
        lines.append("  Loading...")
    elif status is DetailStatus.EMPTY:
        lines.append("  No data found")
    elif status is DetailStatus.READY:
        for title, items in state.sections():
            lines.append(title)
            lines.extend(f"  - {item.label or item.id}" for item in items)
            lines.append("")
    if state.deleting:
        lines.append("  Deleting...")
    if state.error:
        lines.append(f"  Error: {state.error}")
    lines.append("")
    lines.append(help_text(_DETAIL_COMMANDS))
    return "\n".join(lines)


def render_modal(modal: ConfirmModal) -> str:
    """Render a confirmation prompt with the selected button bracketed."""
    confirm = f"[{modal.confirm_text}]" if modal.confirm_selected else modal.confirm_text
    cancel = modal.cancel_text if modal.confirm_selected else f"[{modal.cancel_text}]"
    return "\n".join([modal.title, "", modal.message, "", f"{confirm}    {cancel}"])


def _page_indicator(state: ListViewState) -> str:
    parts = []
    if state.current_page > 0:
        parts.append("<- Prev")
    parts.append(f"Page {state.current_page + 1}")
    if state.has_next_page:
        parts.append("Next ->")
    return "  " + " | ".join(parts)
