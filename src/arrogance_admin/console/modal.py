"""Confirmation modal for destructive actions."""

from dataclasses import dataclass
from enum import Enum

_TOGGLE_KEYS = {"h", "l", "left", "right", "tab"}


class ModalResult(Enum):
    """Outcome of a key press inside the modal."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class ConfirmModal:
    """Yes/No prompt that starts on the safe option."""

    title: str
    message: str
    confirm_text: str = "Yes"
    cancel_text: str = "No"
    confirm_selected: bool = False

    def handle_key(self, key: str) -> ModalResult:
        """Apply a key press and report whether the modal is done."""
        key = key.strip().lower()
        if key in _TOGGLE_KEYS:
            self.confirm_selected = not self.confirm_selected
            return ModalResult.PENDING
        if key in {"enter", "return"}:
            if self.confirm_selected:
                return ModalResult.CONFIRMED
            return ModalResult.CANCELLED
        if key in {"esc", "escape"}:
            return ModalResult.CANCELLED
        return ModalResult.PENDING
