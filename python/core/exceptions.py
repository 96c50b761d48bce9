"""
Custom exception hierarchy for the application.
All exceptions inherit from AppException for unified handling.
"""

from typing import Optional, Dict, Any, List


class AppException(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        status_code: HTTP status code for API responses
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# === Not Found Errors ===

class NotFoundError(AppException):
    """Resource not found (or not owned by the caller)."""

    def __init__(self, entity: str, identifier: str = None):
        message = f"{entity} not found"
        if identifier:
            message = f"{entity} '{identifier}' not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404
        )


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


class DatasetNotFoundError(NotFoundError):
    def __init__(self, dataset_id: str):
        super().__init__("Dataset", dataset_id)


# === Validation Errors ===

class ValidationError(AppException):
    """Input validation failed; `errors` lists every offending field."""

    def __init__(self, message: str, field: str = None, errors: List[Dict[str, Any]] = None):
        details = {"field": field} if field else {}
        if errors:
            details["errors"] = errors
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            details=details
        )


class BadRequestError(AppException):
    """Request is missing something the operation needs."""

    def __init__(self, message: str, field: str = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=400,
            details=details
        )


# === Database Errors ===

class DatabaseError(AppException):
    """Database operation failed."""

    def __init__(self, message: str, operation: str = None):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=f"Database error: {message}",
            code="DATABASE_ERROR",
            status_code=500,
            details=details
        )


# === Authentication Errors ===

class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(self, message: str = "Access token required", status_code: int = 401):
        super().__init__(
            message=message,
            code="AUTHENTICATION_ERROR",
            status_code=status_code
        )


class InvalidTokenError(AuthenticationError):
    def __init__(self):
        super().__init__(message="Invalid or expired token", status_code=403)


class ModelAccessDeniedError(AppException):
    """Trained model name matches none of the caller's datasets."""

    def __init__(self, model_name: str):
        super().__init__(
            message="Access denied. This trained model does not belong to your datasets.",
            code="ACCESS_DENIED",
            status_code=403,
            details={"modelName": model_name}
        )


# === Export Errors ===

class ExportError(AppException):
    """Training export could not be built."""

    def __init__(
        self,
        message: str,
        code: str = "EXPORT_ERROR",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            details=details
        )


class NoAnnotationsError(ExportError):
    def __init__(self, dataset_id: str = None):
        super().__init__(
            message="No annotations found for this dataset",
            code="NO_ANNOTATIONS",
            details={"dataset_id": dataset_id} if dataset_id else None
        )


class NoMatchedImagesError(ExportError):
    """No annotation could be paired with a stored image."""

    def __init__(self, available_images: List[str], annotation_image_ids: List[str]):
        super().__init__(
            message=(
                "No images could be matched with annotations. Please check your "
                "annotation imageId values match actual image filenames."
            ),
            code="NO_MATCHED_IMAGES",
            details={
                "availableImages": list(available_images)[:10],
                "annotationImageIds": list(annotation_image_ids),
            }
        )


class StorageReadError(ExportError):
    """A dataset file could not be read from storage."""

    def __init__(self, filename: str, reason: str = None):
        message = f"Failed to read '{filename}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="STORAGE_READ_ERROR",
            status_code=500,
            details={"filename": filename}
        )


# === Worker Errors ===

class WorkerError(AppException):
    """Call to the external training worker failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        code: str = "WORKER_ERROR"
    ):
        self.worker_status = status_code
        self.worker_body = body
        super().__init__(
            message=message,
            code=code,
            status_code=502,
            details={"status_code": status_code, "body": body}
        )


class UploadDispatchError(WorkerError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=status_code,
            body=body,
            code="UPLOAD_DISPATCH_ERROR"
        )
