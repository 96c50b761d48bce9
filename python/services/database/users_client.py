from typing import Dict, Optional

import asyncpg

from core.exceptions import DatabaseError
from core.logging import get_logger

logger = get_logger(__name__)


class UsersClient:
    """Client for user lookups used by authentication."""
    
    async def get_user_by_id(self, user_id: str) -> Optional[Dict]:
        """Get a user's id and email, or None."""
        try:
            return await self.fetchone(
                'SELECT id, email FROM users WHERE id = $1',
                user_id
            )
        except asyncpg.PostgresError as e:
            logger.error(f"[UsersClient] Error getting user {user_id}: {e}")
            raise DatabaseError(str(e), operation="get_user_by_id")
