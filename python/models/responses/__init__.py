"""
Response DTOs - API output models.
Used for structuring API responses.
"""

from models.responses.training import (
    TrainingStartResponse,
    RunpodStartResponse,
)
from models.responses.trained_models import (
    TrainedModelsResponse,
    TrainedModelResponse,
    ModelDownloadResponse,
)

__all__ = [
    'TrainingStartResponse',
    'RunpodStartResponse',
    'TrainedModelsResponse',
    'TrainedModelResponse',
    'ModelDownloadResponse',
]
