"""
Annotation domain models.
Represents labeled boxes drawn over dataset images and their classes.
"""

import json
from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field


class BoundingBox(BaseModel):
    """Box geometry in pixel units, top-left origin."""
    
    x: float = Field(..., description="Left edge X coordinate")
    y: float = Field(..., description="Top edge Y coordinate")
    width: float = Field(..., description="Box width")
    height: float = Field(..., description="Box height")


class AnnotationRecord(BaseModel):
    """
    One labeled box.
    
    `image_id` is a free-form reference to a filename in dataset storage;
    nothing guarantees it names a file that exists.
    """
    
    id: str
    class_id: str
    image_id: str
    dataset_id: str
    geometry: BoundingBox
    label: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict, description="Raw annotation payload")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    
    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AnnotationRecord":
        """
        Build from an `annotations` table row.
        
        The geometry and label are stored together in the JSON `data` column.
        Raises pydantic.ValidationError when the geometry is incomplete.
        """
        data = row.get("data") or {}
        if isinstance(data, str):
            data = json.loads(data)
        
        return cls(
            id=row["id"],
            class_id=row["classId"],
            image_id=row["imageId"],
            dataset_id=row["datasetId"],
            geometry=BoundingBox(
                x=data.get("x"),
                y=data.get("y"),
                width=data.get("width"),
                height=data.get("height"),
            ),
            label=data.get("label"),
            data=data,
            created_at=row.get("createdAt"),
            updated_at=row.get("updatedAt"),
        )


class AnnotationClass(BaseModel):
    """Named class, unique per dataset."""
    
    id: Optional[str] = None
    name: str
    color: str = ""
    dataset_id: Optional[str] = None
    
    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AnnotationClass":
        return cls(
            id=row.get("id"),
            name=row["name"],
            color=row.get("color") or "",
            dataset_id=row.get("datasetId"),
        )
