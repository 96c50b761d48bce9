"""
Services package.

Main modules:
- training_service.py - TrainingService facade
- trained_models_service.py - Trained model listing and downloads
- database/ - Modular asyncpg PostgresClient
- auth.py - JWT authentication

Training subpackage (services/training/):
- reconciliation.py - Annotation to image pairing
- labels.py - Normalized label conversion
- archive.py - Training archive layout
- export.py - Export pipeline
"""

from services.training_service import TrainingService
from services.trained_models_service import TrainedModelsService
from services.database import PostgresClient

__all__ = [
    'TrainingService',
    'TrainedModelsService',
    'PostgresClient',
]
