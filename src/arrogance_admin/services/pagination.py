"""Page token history for backward navigation."""

from dataclasses import dataclass, field

from arrogance_admin.errors import OutOfRangeError


@dataclass
class PageCursorTracker:
    """Remembers the token used to reach each page the first time.

    Slot ``i`` holds the token for page ``i + 1``; page 0 never needs one.
    Slots are appended once and never removed.
    """

    _tokens: list[str] = field(default_factory=list)

    @property
    def pages_visited(self) -> int:
        """Return the number of pages whose tokens are known, page 0 included."""
        return len(self._tokens) + 1

    def record_token(self, page_index: int, token: str) -> None:
        """Record the token for a page reached forward, once."""
        if page_index <= 0:
            return
        slot = page_index - 1
        if slot < len(self._tokens):
            return
        if slot > len(self._tokens):
            raise OutOfRangeError(
                f"Cannot record page {page_index} before page {len(self._tokens) + 1}"
            )
        self._tokens.append(token)

    def token_for(self, target_page: int) -> str | None:
        """Return the token that loads ``target_page``."""
        if target_page == 0:
            return None
        slot = target_page - 1
        if target_page < 0 or slot >= len(self._tokens):
            raise OutOfRangeError(f"Page {target_page} was never reached forward")
        return self._tokens[slot]
