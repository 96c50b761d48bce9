from typing import Dict, List, Optional

import asyncpg

from core.exceptions import DatabaseError
from core.logging import get_logger
from models.domain.dataset import Project, Dataset

logger = get_logger(__name__)


class ProjectsClient:
    """Ownership-scoped lookups for projects and datasets."""
    
    async def get_project_for_user(self, project_id: str, user_id: str) -> Optional[Project]:
        """Project if it exists and belongs to user_id, otherwise None."""
        try:
            row = await self.fetchone(
                'SELECT * FROM projects WHERE id = $1 AND "userId" = $2',
                project_id, user_id
            )
        except asyncpg.PostgresError as e:
            logger.error(f"[ProjectsClient] Error getting project {project_id}: {e}")
            raise DatabaseError(str(e), operation="get_project_for_user")
        return Project.from_row(row) if row else None
    
    async def get_dataset_for_user(self, dataset_id: str, user_id: str) -> Optional[Dataset]:
        """Dataset if it exists and belongs to user_id, otherwise None."""
        try:
            row = await self.fetchone(
                'SELECT * FROM datasets WHERE id = $1 AND "userId" = $2',
                dataset_id, user_id
            )
        except asyncpg.PostgresError as e:
            logger.error(f"[ProjectsClient] Error getting dataset {dataset_id}: {e}")
            raise DatabaseError(str(e), operation="get_dataset_for_user")
        return Dataset.from_row(row) if row else None
    
    async def list_datasets_for_user(self, user_id: str) -> List[Dict]:
        """
        Datasets owned by user_id with their project, oldest first.
        
        Returns dicts shaped {id, name, createdAt, project: {id, name}}.
        """
        try:
            rows = await self.fetch(
                '''
                SELECT d.id, d.name, d."createdAt",
                       p.id AS "projectId", p.name AS "projectName"
                FROM datasets d
                JOIN projects p ON p.id = d."projectId"
                WHERE d."userId" = $1
                ORDER BY d."createdAt", d.id
                ''',
                user_id
            )
        except asyncpg.PostgresError as e:
            logger.error(f"[ProjectsClient] Error listing datasets for user {user_id}: {e}")
            raise DatabaseError(str(e), operation="list_datasets_for_user")
        
        return [
            {
                "id": row["id"],
                "name": row["name"],
                "createdAt": row["createdAt"],
                "project": {"id": row["projectId"], "name": row["projectName"]},
            }
            for row in rows
        ]
