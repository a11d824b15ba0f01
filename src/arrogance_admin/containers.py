"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from arrogance_admin.adapters.supabase_client import SupabaseClientProvider
from arrogance_admin.adapters.supabase_record_store import SupabaseRecordStore
from arrogance_admin.adapters.supabase_user_list_source import SupabaseUserListSource
from arrogance_admin.config import Settings
from arrogance_admin.services.deletion import CascadingDeletionProtocol
from arrogance_admin.services.records import RemoteRecordStore
from arrogance_admin.services.users import RemoteListSource


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    list_source: RemoteListSource
    record_store: RemoteRecordStore
    deletion_protocol: CascadingDeletionProtocol
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    client_provider = SupabaseClientProvider(
        url=resolved_settings.supabase_url,
        key=resolved_settings.supabase_service_key,
    )
    list_source = SupabaseUserListSource(
        provider=client_provider, table=resolved_settings.users_table
    )
    record_store = SupabaseRecordStore(
        provider=client_provider, users_table=resolved_settings.users_table
    )
    deletion_protocol = CascadingDeletionProtocol(record_store)

    async def close_resources() -> None:
        await client_provider.close()

    return AppContainer(
        settings=resolved_settings,
        list_source=list_source,
        record_store=record_store,
        deletion_protocol=deletion_protocol,
        close_resources=close_resources,
    )
