"""
Models package - data structures for the application.

Subpackages:
- domain/ - Domain models (core business entities)
- requests/ - Request DTOs (API input)
- responses/ - Response DTOs (API output)
"""

from models.domain.annotation import AnnotationRecord, AnnotationClass, BoundingBox
from models.domain.dataset import Project, Dataset
from models.domain.training import TrainingConfig, ExportResult

__all__ = [
    'AnnotationRecord',
    'AnnotationClass',
    'BoundingBox',
    'Project',
    'Dataset',
    'TrainingConfig',
    'ExportResult',
]
