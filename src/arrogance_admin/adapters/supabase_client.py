"""Process-wide Supabase client handle."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from supabase import AsyncClient, acreate_client

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseClientProvider:
    """Creates the Supabase client on first use and reuses it afterwards."""

    url: str
    key: str
    factory: Callable[[str, str], Awaitable[AsyncClient]] = acreate_client
    _client: AsyncClient | None = field(default=None, init=False, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def get(self) -> AsyncClient:
        """Return the shared client, creating it once."""
        if self._client is not None:
            return self._client
        async with self._lock:
            if self._client is None:
                self._client = await self.factory(self.url, self.key)
                _logger.info("Supabase client initialized: url=%s", self.url)
        return self._client

    async def close(self) -> None:
        """Close the PostgREST session if the client was ever created."""
        if self._client is None:
            return
        await self._client.postgrest.aclose()
        self._client = None
