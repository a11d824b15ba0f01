"""Error taxonomy for the admin console."""


class AdminError(Exception):
    """Base class for admin console errors."""


class FetchError(AdminError):
    """A list or detail query against a remote store failed."""


class PartialLoadError(AdminError):
    """One or more of the detail collection fetches failed."""

    def __init__(self, failed: list[str]) -> None:
        self.failed = failed
        super().__init__(f"Failed to load: {', '.join(failed)}")


class DeletionError(AdminError):
    """A step of the cascading deletion failed."""

    def __init__(self, user_id: str, step: str, reason: str) -> None:
        self.user_id = user_id
        self.step = step
        super().__init__(f"Deleting {user_id} failed at {step}: {reason}")


class OutOfRangeError(AdminError):
    """A page token was requested for a page never reached forward."""
