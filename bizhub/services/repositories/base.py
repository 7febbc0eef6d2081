"""Base repository with shared Supabase client."""

import httpx
from postgrest.exceptions import APIError
from supabase._async.client import AsyncClient

# Exceptions a Supabase round trip can raise
REMOTE_ERRORS = (APIError, httpx.HTTPError)


class BaseRepository:
    """Base class for all repositories.

    Repositories issue one query per method and let Supabase errors
    propagate; the domain layer decides what the user sees.
    """

    table: str = ""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    def _query(self):
        return self.client.table(self.table)
