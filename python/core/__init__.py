"""
Core package - foundation for the application.

Modules:
- config.py - Application settings via Pydantic Settings
- exceptions.py - AppException hierarchy (validation, auth, export, worker)
- responses.py - ApiResponse envelope
- logging.py - Logging setup and get_logger
"""

from core.config import settings, VERSION
from core.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    BadRequestError,
    DatabaseError,
    AuthenticationError,
    InvalidTokenError,
    ExportError,
    NoAnnotationsError,
    NoMatchedImagesError,
    StorageReadError,
    WorkerError,
    UploadDispatchError,
)
from core.responses import ApiResponse

__all__ = [
    'settings',
    'VERSION',
    'AppException',
    'NotFoundError',
    'ValidationError',
    'BadRequestError',
    'DatabaseError',
    'AuthenticationError',
    'InvalidTokenError',
    'ExportError',
    'NoAnnotationsError',
    'NoMatchedImagesError',
    'StorageReadError',
    'WorkerError',
    'UploadDispatchError',
    'ApiResponse',
]
