"""Base client with connection pool management."""

from typing import List, Dict, Optional, Any
import asyncpg

from core.config import settings
from core.exceptions import DatabaseError
from core.logging import get_logger

logger = get_logger(__name__)


class BaseClient:
    """Base database client with connection pooling."""
    
    def __init__(self, database_url: Optional[str] = None):
        """Pool is created lazily by connect()."""
        self.pool: Optional[asyncpg.Pool] = None
        self.database_url = database_url or settings.database_url
        logger.info("[PostgresClient] Initialized (pool will be created on startup)")
    
    async def connect(self):
        """Initialize connection pool"""
        if not self.database_url:
            raise DatabaseError("DATABASE_URL is not configured", operation="connect")
        if not self.pool:
            self.pool = await asyncpg.create_pool(
                self.database_url,
                min_size=2,
                max_size=10,
                command_timeout=60
            )
            logger.info("[PostgresClient] Connection pool initialized")
    
    async def disconnect(self):
        """Close connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("[PostgresClient] Connection pool closed")
    
    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise DatabaseError("Connection pool is not initialized", operation="acquire")
        return self.pool
    
    async def fetch(self, query: str, *args) -> List[Dict[str, Any]]:
        """Fetch multiple rows"""
        async with self._require_pool().acquire() as conn:
            rows = await conn.fetch(query, *args)
            return [dict(row) for row in rows]
    
    async def fetchone(self, query: str, *args) -> Optional[Dict[str, Any]]:
        """Fetch single row"""
        async with self._require_pool().acquire() as conn:
            row = await conn.fetchrow(query, *args)
            return dict(row) if row else None
