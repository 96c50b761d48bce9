"""
Trained model response models.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class TrainedModelsResponse(BaseModel):
    """Models the worker holds for the caller's datasets."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    message: str = "Trained models retrieved successfully"
    trained_models: List[Any] = Field(default_factory=list, alias="trainedModels")
    user_datasets: Optional[List[Dict[str, Any]]] = Field(None, alias="userDatasets")
    source: Optional[str] = None


class TrainedModelResponse(BaseModel):
    message: str = "Trained model details retrieved successfully"
    model: Any = None
    source: str = "cloudflare-worker"


class ModelDownloadResponse(BaseModel):
    """Presigned download link for a trained model."""
    
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())
    
    message: str = "Download URL generated successfully"
    download_url: Optional[str] = Field(None, alias="downloadUrl")
    expires_in: str = Field("1 hour", alias="expiresIn")
    model_name: str = Field(..., alias="modelName")
