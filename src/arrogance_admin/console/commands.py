"""Keyboard command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class KeyBinding:
    """Declarative key binding definition."""

    keys: tuple[str, ...]
    description: str


class Command(Enum):
    """Enum of console commands (single source of truth)."""

    MOVE_DOWN = KeyBinding(("j", "down"), "move down")
    MOVE_UP = KeyBinding(("k", "up"), "move up")
    NEXT_PAGE = KeyBinding(("l", "right"), "next page")
    PREV_PAGE = KeyBinding(("h", "left"), "previous page")
    SELECT = KeyBinding(("enter", "return"), "open user")
    BACK = KeyBinding(("esc", "escape", "delete"), "go back")
    REQUEST_DELETE = KeyBinding(("ctrl+d",), "delete user")
    RELOAD = KeyBinding(("r",), "reload")
    QUIT = KeyBinding(("q", "ctrl+c"), "quit")


_KEY_TO_COMMAND = {key: command for command in Command for key in command.value.keys}


def command_for(key: str) -> Command | None:
    """Return the command bound to a key name, if any."""
    return _KEY_TO_COMMAND.get(key.strip().lower())


def help_text(commands: list[Command]) -> str:
    """Return a footer line describing the given commands."""
    return ", ".join(
        f"{'/'.join(command.value.keys[:2])} {command.value.description}"
        for command in commands
    )
