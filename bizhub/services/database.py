"""
Supabase Database Service

One Database object per process, holding the Supabase clients, the
repositories and the domain services built on them.

Usage:
    from bizhub.services.database import get_database_async

    db = await get_database_async()
    detail = await db.catalog.business_detail(business_id)

    # At FastAPI startup (lifespan):
    await init_database()

Handlers await initialization instead of polling for a ready client.
"""

import asyncio
import os
from typing import Optional

from supabase._async.client import AsyncClient
from supabase._async.client import create_client as acreate_client

from bizhub.logging import get_logger
from bizhub.services.domains import CatalogService, ChatDomain, ProductManager, UsersDomain
from bizhub.services.repositories import (
    BusinessRepository,
    CategoryRepository,
    ConversationRepository,
    ProductRepository,
    UserRepository,
)
from bizhub.services.storage import ImageStorage

logger = get_logger(__name__)


class Database:
    """
    Supabase clients plus the domain services built on them.

    ``client`` uses the service-role key for table and storage access.
    ``auth_client`` uses the anon key and is only used for password
    sign-in, so user sessions never leak into the service client's
    request headers.

    Must be created via ``Database.create()`` or ``init_database()``
    outside of tests.
    """

    def __init__(self, client: AsyncClient, auth_client: Optional[AsyncClient] = None):
        self.client = client
        self.auth_client = auth_client or client

        self._users_repo = UserRepository(self.client)
        self._categories_repo = CategoryRepository(self.client)
        self._businesses_repo = BusinessRepository(self.client)
        self._products_repo = ProductRepository(self.client)
        self._conversations_repo = ConversationRepository(self.client)

        self.storage = ImageStorage(self.client)

        self.users = UsersDomain(self._users_repo)
        self.catalog = CatalogService(self._businesses_repo, self._categories_repo, self._products_repo)
        self.products = ProductManager(self._businesses_repo, self._products_repo, self.storage)
        self.chat = ChatDomain(self._conversations_repo)

    @classmethod
    async def create(cls) -> "Database":
        """Create both Supabase clients from the environment."""
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        anon_key = os.environ.get("SUPABASE_ANON_KEY") or key

        client = await acreate_client(url, key)
        auth_client = await acreate_client(url, anon_key)
        return cls(client, auth_client)


# Singleton instance (initialized at startup via init_database())
_db: Database | None = None
_db_lock: Optional[asyncio.Lock] = None


def _get_lock() -> asyncio.Lock:
    """Lock created lazily so it binds to the running loop."""
    global _db_lock
    if _db_lock is None:
        _db_lock = asyncio.Lock()
    return _db_lock


async def init_database() -> Database:
    """Initialize the database singleton (idempotent, safe under concurrent callers)."""
    global _db
    if _db is not None:
        return _db

    async with _get_lock():
        if _db is None:
            logger.info("Initializing async Supabase client...")
            _db = await Database.create()
            logger.info("Async Supabase client initialized successfully")
    return _db


async def close_database() -> None:
    """Drop the singleton. Called at FastAPI shutdown."""
    global _db
    if _db is not None:
        try:
            await _db.auth_client.auth.sign_out()
        except Exception as e:
            logger.warning(f"Error closing Supabase auth client: {e}")
        _db = None
        logger.info("Supabase client closed")


async def get_database_async() -> Database:
    """Database instance, initializing it on first use."""
    if _db is None:
        return await init_database()
    return _db
