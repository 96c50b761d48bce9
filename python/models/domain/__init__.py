"""
Domain models - core business entities.

These are the source of truth for data structures.
Request and response DTOs and the database client build on these.
"""

from models.domain.annotation import AnnotationRecord, AnnotationClass, BoundingBox
from models.domain.dataset import Project, Dataset
from models.domain.training import (
    TrainingConfig,
    ExportResult,
    WorkerUploadResult,
    ReconciliationMode,
)

__all__ = [
    'AnnotationRecord',
    'AnnotationClass',
    'BoundingBox',
    'Project',
    'Dataset',
    'TrainingConfig',
    'ExportResult',
    'WorkerUploadResult',
    'ReconciliationMode',
]
