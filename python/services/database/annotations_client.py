from typing import Dict, List

import asyncpg
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import DatabaseError
from core.logging import get_logger
from models.domain.annotation import AnnotationRecord, AnnotationClass

logger = get_logger(__name__)


class AnnotationsClient:
    """Client for annotations and annotation classes."""
    
    async def list_annotations(self, dataset_id: str) -> List[AnnotationRecord]:
        """
        All annotations of a dataset, oldest first.
        
        Rows whose data has no usable box geometry are skipped.
        """
        try:
            rows = await self.fetch(
                '''
                SELECT * FROM annotations
                WHERE "datasetId" = $1
                ORDER BY "createdAt", id
                ''',
                dataset_id
            )
        except asyncpg.PostgresError as e:
            logger.error(f"[AnnotationsClient] Error listing annotations for {dataset_id}: {e}")
            raise DatabaseError(str(e), operation="list_annotations")
        
        annotations = []
        for row in rows:
            try:
                annotations.append(AnnotationRecord.from_row(row))
            except (PydanticValidationError, ValueError) as e:
                logger.warning(f"[AnnotationsClient] Skipping malformed annotation {row.get('id')}: {e}")
        return annotations
    
    async def list_annotation_classes(self, dataset_id: str, user_id: str) -> List[AnnotationClass]:
        """Classes of a dataset in creation order; the order defines label indices."""
        try:
            rows = await self.fetch(
                '''
                SELECT * FROM annotation_classes
                WHERE "datasetId" = $1 AND "userId" = $2
                ORDER BY "createdAt", id
                ''',
                dataset_id, user_id
            )
        except asyncpg.PostgresError as e:
            logger.error(f"[AnnotationsClient] Error listing classes for {dataset_id}: {e}")
            raise DatabaseError(str(e), operation="list_annotation_classes")
        return [AnnotationClass.from_row(row) for row in rows]
    
    async def list_user_annotations(self, user_id: str) -> List[Dict]:
        """Raw annotation rows of a user, newest first."""
        try:
            return await self.fetch(
                '''
                SELECT id, "classId", "imageId", "datasetId", data, "createdAt", "updatedAt"
                FROM annotations
                WHERE "userId" = $1
                ORDER BY "createdAt" DESC
                ''',
                user_id
            )
        except asyncpg.PostgresError as e:
            logger.error(f"[AnnotationsClient] Error listing annotations for user {user_id}: {e}")
            raise DatabaseError(str(e), operation="list_user_annotations")
