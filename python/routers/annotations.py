"""
Annotations API Router
Bulk export of a user's annotations as a downloadable JSON file.
"""

import json
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import Response

from core.logging import get_logger
from services.auth import get_current_user

logger = get_logger(__name__)
router = APIRouter()

db_instance = None


def set_services(db):
    global db_instance
    db_instance = db


def _serialize_annotation(row: dict) -> dict:
    data = row.get("data")
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError:
            logger.warning(f"Annotation {row.get('id')} has non-JSON data, exported as text")
    return {
        "id": row.get("id"),
        "classId": row.get("classId"),
        "imageId": row.get("imageId"),
        "datasetId": row.get("datasetId"),
        "data": data,
        "createdAt": row.get("createdAt"),
        "updatedAt": row.get("updatedAt"),
    }


@router.get("/export")
async def export_annotations(user: dict = Depends(get_current_user)):
    """Download every annotation of the current user, newest first."""
    user_id = user["id"]
    rows = await db_instance.list_user_annotations(user_id)

    now = datetime.now(timezone.utc)
    export_data = {
        "exportDate": now.isoformat(),
        "userId": user_id,
        "totalAnnotations": len(rows),
        "annotations": [_serialize_annotation(row) for row in rows],
    }
    logger.info(f"Exporting {len(rows)} annotations for user {user_id}")

    filename = f"annotations_{user_id}_{now.strftime('%Y-%m-%d')}.json"
    return Response(
        content=json.dumps(jsonable_encoder(export_data), indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
