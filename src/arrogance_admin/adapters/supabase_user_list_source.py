"""Supabase-backed user enumeration."""

from dataclasses import dataclass

from arrogance_admin.adapters.supabase_client import SupabaseClientProvider
from arrogance_admin.adapters.supabase_rows import parse_timestamp
from arrogance_admin.domain.models import UserPage, UserRecord
from arrogance_admin.services.users import RemoteListSource


@dataclass
class SupabaseUserListSource(RemoteListSource):
    """Lists users with keyset pagination on ``id``.

    The page token is the last id of the previous page, so pages stay stable
    as long as ids are unique and ordered.
    """

    provider: SupabaseClientProvider
    table: str = "users"

    async def fetch(self, page_size: int, page_token: str | None) -> UserPage:
        """Return up to ``page_size`` users after ``page_token``."""
        client = await self.provider.get()
        query = (
            client.table(self.table)
            .select("id, email, created_at, last_sign_in_at")
            .order("id")
        )
        if page_token is not None:
            query = query.gt("id", page_token)
        # One extra row tells whether another page exists.
        response = await query.limit(page_size + 1).execute()
        rows = response.data or []
        users = [_parse_user(row) for row in rows[:page_size]]
        next_page_token = users[-1].id if len(rows) > page_size else None
        return UserPage(users=users, next_page_token=next_page_token)


def _parse_user(row: dict[str, object]) -> UserRecord:
    email = row.get("email")
    return UserRecord(
        id=str(row["id"]),
        created_at=parse_timestamp(row.get("created_at")),
        last_login_at=parse_timestamp(row.get("last_sign_in_at")),
        email=email if isinstance(email, str) else None,
    )
