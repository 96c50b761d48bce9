"""
Request DTOs - API input models.
Used for validating incoming API requests.
"""

from models.requests.training import (
    StartTrainingRequest,
    StartRunpodRequest,
    ExportToWorkerRequest,
)

__all__ = [
    'StartTrainingRequest',
    'StartRunpodRequest',
    'ExportToWorkerRequest',
]
