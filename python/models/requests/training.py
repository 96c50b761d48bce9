"""
Training request models.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from models.domain.training import TrainingConfig


class StartTrainingRequest(BaseModel):
    """Request to export a dataset and start training on the worker."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    project_id: str = Field(..., min_length=1, alias="projectId", description="Project ID is required")
    dataset_id: str = Field(..., min_length=1, alias="datasetId", description="Dataset ID is required")
    dataset_name: str = Field(..., min_length=1, alias="datasetName", description="Dataset name is required")
    training_config: TrainingConfig = Field(..., alias="trainingConfig", description="Training configuration is required")
    
    @field_validator("project_id", "dataset_id", "dataset_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value
    
    @field_validator("dataset_name")
    @classmethod
    def _no_path_separators(cls, value: str) -> str:
        # The name becomes the archive's top-level folder
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError("must not contain path separators")
        return value


class StartRunpodRequest(BaseModel):
    """Request to start training from an already uploaded dataset."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    dataset_url: Optional[str] = Field(None, alias="datasetUrl")
    dataset_name: Optional[str] = Field(None, alias="datasetName")
    training_config: Optional[TrainingConfig] = Field(None, alias="trainingConfig")


class ExportToWorkerRequest(BaseModel):
    """Request to forward a client-built archive to the worker as-is."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    dataset_zip: Optional[str] = Field(None, alias="datasetZip", description="Base64 encoded ZIP")
    dataset_name: Optional[str] = Field(None, alias="datasetName")
    upload_path: Optional[str] = Field(None, alias="uploadPath")
    training_config: Optional[TrainingConfig] = Field(None, alias="trainingConfig")
