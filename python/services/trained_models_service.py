"""
TrainedModelsService - trained model listing and downloads through the worker.

Models live in the worker's object storage and are not tracked in the
database. A model belongs to a user when its name contains the name of one
of the user's datasets (compared case-insensitively).
"""

from typing import Dict, List

from fastapi.encoders import jsonable_encoder

from core.exceptions import ModelAccessDeniedError
from core.logging import get_logger
from infrastructure.worker_client import WorkerClient
from models.responses.trained_models import (
    ModelDownloadResponse,
    TrainedModelResponse,
    TrainedModelsResponse,
)

logger = get_logger(__name__)

WORKER_SOURCE = "cloudflare-worker"


def owns_model(model_name: str, dataset_names: List[str]) -> bool:
    """True when any non-empty dataset name occurs in model_name, ignoring case."""
    lowered = model_name.lower()
    return any(name and name.lower() in lowered for name in dataset_names)


class TrainedModelsService:
    """Facade for trained model operations."""

    def __init__(self, db, worker: WorkerClient):
        self.db = db
        self.worker = worker
        logger.info("[TrainedModelsService] Initialized")

    async def list_models(self, user_id: str) -> TrainedModelsResponse:
        """Models for every dataset the user owns; the worker is not called when there are none."""
        datasets: List[Dict] = jsonable_encoder(await self.db.list_datasets_for_user(user_id))
        logger.info(f"Found {len(datasets)} datasets for user {user_id}")

        if not datasets:
            return TrainedModelsResponse(message="No trained models found", trained_models=[])

        models = await self.worker.trained_models(user_id, datasets)
        return TrainedModelsResponse(
            trained_models=models,
            user_datasets=datasets,
            source=WORKER_SOURCE,
        )

    async def get_model(self, user_id: str, model_name: str) -> TrainedModelResponse:
        """
        Raises:
            ModelAccessDeniedError: model matches none of the user's datasets
        """
        await self._check_access(user_id, model_name)
        details = await self.worker.trained_model(model_name)
        return TrainedModelResponse(model=details)

    async def download_url(self, user_id: str, model_name: str) -> ModelDownloadResponse:
        """
        Raises:
            ModelAccessDeniedError: model matches none of the user's datasets
        """
        await self._check_access(user_id, model_name)
        logger.info(f"Requesting download URL for model {model_name} (user {user_id})")

        result = await self.worker.model_download_url(model_name)
        return ModelDownloadResponse(
            download_url=result.get("url"),
            expires_in=result.get("expiresIn") or "1 hour",
            model_name=model_name,
        )

    async def _check_access(self, user_id: str, model_name: str):
        datasets = await self.db.list_datasets_for_user(user_id)
        if not owns_model(model_name, [d["name"] for d in datasets]):
            logger.warning(f"User {user_id} denied access to model {model_name}")
            raise ModelAccessDeniedError(model_name)
