"""
Training response models.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class TrainingStartResponse(BaseModel):
    """Returned once the archive has been accepted by the worker."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    message: str = "Training dataset uploaded successfully through worker"
    training_id: str = Field(..., alias="trainingId")
    object_name: Optional[str] = Field(None, alias="objectName")
    bucket_name: Optional[str] = Field(None, alias="bucketName")
    download_url: Optional[str] = Field(None, alias="downloadUrl")
    download_url_expires_in: str = Field("7 days", alias="downloadUrlExpiresIn")
    total_annotated_images: int = Field(..., alias="totalAnnotatedImages")
    total_annotations: int = Field(..., alias="totalAnnotations")
    class_names: List[str] = Field(default_factory=list, alias="classNames")
    training_config: Dict[str, Any] = Field(default_factory=dict, alias="trainingConfig")
    upload_path: Optional[str] = Field(None, alias="uploadPath")


class RunpodStartResponse(BaseModel):
    """Returned when the worker has launched a training pod."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    message: str = "Training started successfully through worker"
    training_id: Optional[str] = Field(None, alias="trainingId")
    pod_id: Optional[str] = Field(None, alias="podId")
    status: Optional[str] = None
    worker_message: Optional[str] = Field(None, alias="workerMessage")
