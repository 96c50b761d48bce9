"""
Training domain models.
Represents the caller's training configuration and the export it produces.
"""

from typing import Optional, Dict, Any, List
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReconciliationMode(str, Enum):
    """How annotations were paired with stored images."""
    EXACT = "exact"         # imageId equals a filename (case-insensitive)
    FALLBACK = "fallback"   # contiguous chunks spread over sorted files


DEFAULT_EPOCHS = 100
DEFAULT_BATCH_SIZE = 16
DEFAULT_IMG_SIZE = 640
DEFAULT_LEARNING_RATE = 0.001
DEFAULT_MODEL_TYPE = "yolov8recommended"
DEFAULT_SPLIT_RATIO = "80/20"


class TrainingConfig(BaseModel):
    """
    Training parameters supplied by the frontend.
    
    Missing, null or empty values fall back to the defaults below. A zero is
    kept as sent (and echoed back) but the manifest replaces it with the
    default. Keys the backend does not know are kept and forwarded to the
    worker untouched.
    """
    
    model_config = ConfigDict(populate_by_name=True, extra="allow", protected_namespaces=())
    
    epochs: int = Field(DEFAULT_EPOCHS, ge=0, alias="epochs")
    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=0, alias="batchSize")
    img_size: int = Field(DEFAULT_IMG_SIZE, ge=0, alias="imgSize")
    learning_rate: float = Field(DEFAULT_LEARNING_RATE, ge=0, alias="learningRate")
    model_type: str = Field(DEFAULT_MODEL_TYPE, alias="modelType")
    dataset_split_ratio: str = Field(DEFAULT_SPLIT_RATIO, alias="datasetSplitRatio")
    
    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None and v != ""}
        return data
    
    def echo(self) -> Dict[str, Any]:
        """The configuration as the caller sent it (camelCase, no filled defaults)."""
        return self.model_dump(by_alias=True, exclude_unset=True)
    
    def to_manifest(self, class_names: List[str], project_name: str) -> Dict[str, Any]:
        """Key order matches the config.yaml layout the worker expects. Zeros become defaults."""
        return {
            "epochs": self.epochs or DEFAULT_EPOCHS,
            "batch_size": self.batch_size or DEFAULT_BATCH_SIZE,
            "img_size": self.img_size or DEFAULT_IMG_SIZE,
            "learning_rate": self.learning_rate or DEFAULT_LEARNING_RATE,
            "model": self.model_type,
            "num_classes": len(class_names),
            "class_names": list(class_names),
            "project_name": project_name,
            "train_val_split": self.dataset_split_ratio,
        }


class ExportResult(BaseModel):
    """Packaged training archive plus bookkeeping for the response."""
    
    archive: bytes = Field(..., description="ZIP bytes")
    root_folder: str = Field(..., description="<datasetName>_Training_<timestamp>")
    timestamp: int = Field(..., description="Milliseconds since epoch")
    annotated_images: List[str] = Field(default_factory=list, description="Images written to the archive")
    skipped_images: List[str] = Field(default_factory=list, description="Images that could not be read")
    total_annotations: int = Field(0, ge=0, description="Annotations loaded for the dataset")
    labeled_annotations: int = Field(0, ge=0, description="Label lines written")
    class_names: List[str] = Field(default_factory=list)
    reconciliation: ReconciliationMode = ReconciliationMode.EXACT
    
    @property
    def total_annotated_images(self) -> int:
        return len(self.annotated_images)


class WorkerUploadResult(BaseModel):
    """Body returned by the worker's /upload-dataset endpoint."""
    
    model_config = ConfigDict(populate_by_name=True, extra="allow")
    
    success: bool = False
    file_name: Optional[str] = Field(None, alias="fileName")
    presigned_url: Optional[str] = Field(None, alias="presignedUrl")
    bucket: Optional[str] = None
    upload_path: Optional[str] = Field(None, alias="uploadPath")
