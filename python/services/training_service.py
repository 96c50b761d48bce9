"""
TrainingService - Facade for dataset export and worker-side training.

Coordinates ownership checks, annotation loading, archive building and the
hand-off to the external worker.

Delegates to specialized modules in services/training/:
- reconciliation.py - Pairing annotations with stored images
- labels.py - Box to normalized label conversion
- archive.py - ZIP layout and config.yaml manifest
- export.py - Export pipeline
"""

import asyncio
import base64
import binascii
import time
from typing import Any, Dict

from core.exceptions import (
    BadRequestError,
    DatasetNotFoundError,
    NoAnnotationsError,
    ProjectNotFoundError,
)
from core.logging import get_logger
from infrastructure.dataset_storage import LocalDatasetStorage
from infrastructure.worker_client import WorkerClient
from models.requests.training import (
    ExportToWorkerRequest,
    StartRunpodRequest,
    StartTrainingRequest,
)
from models.responses.training import RunpodStartResponse, TrainingStartResponse
from services.training import build_export

logger = get_logger(__name__)


def _now_millis() -> int:
    return int(time.time() * 1000)


class TrainingService:
    """
    Facade for training operations.

    Every call is request-scoped: the archive is built in memory, handed to
    the worker and dropped. Nothing is written to the database.
    """

    def __init__(self, db, storage: LocalDatasetStorage, worker: WorkerClient):
        """
        Args:
            db: PostgresClient (or anything with the same lookup methods)
            storage: Dataset file storage
            worker: Worker HTTP client
        """
        self.db = db
        self.storage = storage
        self.worker = worker
        logger.info("[TrainingService] Initialized")

    async def start_training(self, user_id: str, request: StartTrainingRequest) -> TrainingStartResponse:
        """
        Export a dataset as a training archive and upload it to the worker.

        Raises:
            ProjectNotFoundError / DatasetNotFoundError: missing or not owned
            NoAnnotationsError, NoMatchedImagesError, StorageReadError: export failed
            UploadDispatchError: worker rejected or never answered
        """
        project = await self.db.get_project_for_user(request.project_id, user_id)
        if project is None:
            raise ProjectNotFoundError(request.project_id)

        dataset = await self.db.get_dataset_for_user(request.dataset_id, user_id)
        if dataset is None:
            raise DatasetNotFoundError(request.dataset_id)

        annotations = await self.db.list_annotations(dataset.id)
        logger.info(f"Found {len(annotations)} annotations for dataset {dataset.id}")
        if not annotations:
            raise NoAnnotationsError(dataset.id)

        classes = await self.db.list_annotation_classes(dataset.id, user_id)
        image_files = await asyncio.to_thread(self.storage.list_files, dataset.id)
        logger.info(f"Found {len(image_files)} image files in dataset directory")

        timestamp = _now_millis()
        # File reads and compression run off the event loop
        export = await asyncio.to_thread(
            build_export,
            self.storage,
            dataset_id=dataset.id,
            dataset_name=request.dataset_name,
            annotations=annotations,
            classes=classes,
            image_files=image_files,
            config=request.training_config,
            timestamp=timestamp,
        )

        echoed_config = request.training_config.echo()
        upload_path = f"{user_id}/{request.dataset_name}_{timestamp}"

        upload = await self.worker.upload_dataset(
            export.archive,
            upload_path=upload_path,
            training_config=echoed_config,
            auto_start=True,
        )

        logger.info(
            f"Training dataset for project {project.id} uploaded through worker: {upload.file_name}"
        )

        return TrainingStartResponse(
            training_id=f"training_{timestamp}",
            object_name=upload.file_name,
            bucket_name=upload.bucket,
            download_url=upload.presigned_url,
            total_annotated_images=export.total_annotated_images,
            total_annotations=export.total_annotations,
            class_names=export.class_names,
            training_config=echoed_config,
            upload_path=upload.upload_path or upload_path,
        )

    async def start_runpod(self, request: StartRunpodRequest) -> RunpodStartResponse:
        """Start training from a dataset the worker already holds."""
        if not request.dataset_url:
            raise BadRequestError("Dataset URL is required", field="datasetUrl")

        dataset_name = request.dataset_name or "training-dataset"
        config = request.training_config.echo() if request.training_config else {}
        logger.info(f"Starting training through worker for dataset: {dataset_name}")

        result = await self.worker.start_training(dataset_name, config)
        return RunpodStartResponse(
            training_id=result.get("trainingId"),
            pod_id=result.get("podId"),
            status=result.get("status"),
            worker_message=result.get("message"),
        )

    async def training_status(self, training_id: str) -> Any:
        """Worker's status payload for a training run, unchanged."""
        if not training_id:
            raise BadRequestError("Training ID is required", field="trainingId")
        logger.info(f"Checking training status through worker: {training_id}")
        return await self.worker.training_status(training_id)

    async def export_to_worker(self, user_id: str, request: ExportToWorkerRequest) -> Dict[str, Any]:
        """Forward a client-built base64 archive to the worker without starting training."""
        if not request.dataset_zip or not request.dataset_name:
            raise BadRequestError("Dataset ZIP and name are required")

        try:
            archive = base64.b64decode(request.dataset_zip, validate=True)
        except (binascii.Error, ValueError):
            raise BadRequestError("Dataset ZIP is not valid base64", field="datasetZip")

        upload_path = request.upload_path or f"{user_id}/{request.dataset_name}_{_now_millis()}"
        config = request.training_config.echo() if request.training_config else {}
        logger.info(f"Direct export to worker: {request.dataset_name}, path: {upload_path}")

        return await self.worker.upload_raw(
            archive,
            upload_path=upload_path,
            training_config=config,
            auto_start=False,
        )
