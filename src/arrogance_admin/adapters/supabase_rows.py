"""Helpers for reading Supabase response rows."""

from datetime import datetime


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 column value, treating empty values as absent."""
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value
    return None
