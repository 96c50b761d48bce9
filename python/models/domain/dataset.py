"""
Project and dataset domain models.
"""

from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

INT64_MAX = 2 ** 63 - 1
INT64_MIN = -(2 ** 63)


class Project(BaseModel):
    """User-owned annotation project."""
    
    id: str
    name: str
    user_id: str
    description: Optional[str] = None
    project_type: str = "object_detection"
    created_at: Optional[datetime] = None
    
    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Project":
        return cls(
            id=row["id"],
            name=row["name"],
            user_id=row["userId"],
            description=row.get("description"),
            project_type=row.get("projectType") or "object_detection",
            created_at=row.get("createdAt"),
        )


class Dataset(BaseModel):
    """Named collection of uploaded images belonging to a project."""
    
    id: str
    name: str
    project_id: str
    user_id: str
    total_size: int = Field(0, description="Stored bytes (BIGINT column)")
    total_files: int = Field(0, ge=0)
    status: str = "ready"
    created_at: Optional[datetime] = None
    
    @field_validator("total_size")
    @classmethod
    def _check_int64(cls, value: int) -> int:
        if value < INT64_MIN or value > INT64_MAX:
            raise ValueError(f"total_size {value} does not fit in a signed 64-bit integer")
        return value
    
    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Dataset":
        return cls(
            id=row["id"],
            name=row["name"],
            project_id=row["projectId"],
            user_id=row["userId"],
            total_size=int(row.get("totalSize") or 0),
            total_files=row.get("totalFiles") or 0,
            status=row.get("status") or "ready",
            created_at=row.get("createdAt"),
        )
