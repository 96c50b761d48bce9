"""
Training worker client.

The worker is an external HTTP service that stores uploaded datasets and
trained models in object storage and launches training pods. Every call is
a single attempt with an explicit timeout; failures surface as WorkerError
subclasses.
"""

import json
from typing import Any, Dict, List, Optional, Type
from urllib.parse import quote

import httpx

from core.config import settings
from core.exceptions import WorkerError, UploadDispatchError
from core.logging import get_logger
from models.domain.training import WorkerUploadResult

logger = get_logger(__name__)


class WorkerClient:
    """Async client for the worker's upload, training and model endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        bucket: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.worker_url or "").rstrip("/")
        self.timeout = timeout if timeout is not None else settings.worker_timeout_seconds
        self.bucket = bucket or settings.worker_bucket
        self._transport = transport

    # ============================================================
    # Upload
    # ============================================================

    async def upload_dataset(
        self,
        archive: bytes,
        upload_path: str,
        training_config: Dict[str, Any],
        auto_start: bool = True,
    ) -> WorkerUploadResult:
        """
        Upload a training archive to the worker.

        The worker must answer with an explicit `success: true`; an HTTP 200
        without it still counts as a failed upload.

        Raises:
            UploadDispatchError: transport failure, timeout, non-2xx or missing success flag
        """
        status, payload = await self._send_upload(
            archive, upload_path, training_config, auto_start, UploadDispatchError
        )

        if not isinstance(payload, dict) or payload.get("success") is not True:
            raise UploadDispatchError(
                "Worker upload failed: No success flag in response",
                status_code=status,
                body=json.dumps(payload),
            )

        result = WorkerUploadResult.model_validate(payload)
        logger.info(f"Worker accepted dataset upload: {result.file_name}")
        return result

    async def upload_raw(
        self,
        archive: bytes,
        upload_path: str,
        training_config: Dict[str, Any],
        auto_start: bool = False,
    ) -> Dict[str, Any]:
        """Upload an archive and relay the worker's JSON body unchanged."""
        _, payload = await self._send_upload(
            archive, upload_path, training_config, auto_start, WorkerError
        )
        if not isinstance(payload, dict):
            payload = {"result": payload}
        logger.info(f"Worker upload relayed: {payload.get('fileName')}")
        return payload

    async def _send_upload(
        self,
        archive: bytes,
        upload_path: str,
        training_config: Dict[str, Any],
        auto_start: bool,
        error_cls: Type[WorkerError],
    ):
        files = {"file": (f"{upload_path}.zip", archive, "application/zip")}
        data = {
            "uploadPath": upload_path,
            "bucket": self.bucket,
            "autoStartTraining": "true" if auto_start else "false",
            "trainingConfig": json.dumps(training_config or {}),
        }
        logger.info(f"Uploading {len(archive)} bytes to worker at {upload_path}")
        return await self._request(
            "POST", "/upload-dataset", error_cls, data=data, files=files
        )

    # ============================================================
    # Training control
    # ============================================================

    async def start_training(
        self,
        dataset_name: str,
        training_config: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Ask the worker to launch a training pod."""
        body = {
            "datasetZip": None,
            "datasetName": dataset_name,
            "trainingConfig": training_config or {},
        }
        status, payload = await self._request("POST", "/start-training", WorkerError, json=body)

        if not isinstance(payload, dict) or payload.get("success") is not True:
            raise WorkerError(
                "Worker training start failed: No success flag in response",
                status_code=status,
                body=json.dumps(payload),
            )

        logger.info(f"Worker started training: {payload.get('trainingId')}")
        return payload

    async def training_status(self, training_id: str) -> Any:
        """Fetch training status; the worker's body is returned verbatim."""
        _, payload = await self._request(
            "GET", "/training-status", WorkerError, params={"id": training_id}
        )
        return payload

    # ============================================================
    # Trained models
    # ============================================================

    async def trained_models(
        self,
        user_id: str,
        user_datasets: List[Dict[str, Any]],
    ) -> List[Any]:
        """
        List trained models the worker holds for the user's datasets.

        user_datasets must be JSON-ready ({id, name, createdAt, project}).
        """
        body = {
            "userId": user_id,
            "datasetNames": [d["name"] for d in user_datasets],
            "datasetIds": [d["id"] for d in user_datasets],
            "userDatasets": user_datasets,
        }
        _, payload = await self._request("POST", "/trained-models", WorkerError, json=body)
        models = payload.get("trainedModels") if isinstance(payload, dict) else None
        logger.info(f"Worker returned {len(models or [])} trained models for user {user_id}")
        return models or []

    async def trained_model(self, model_name: str) -> Any:
        """Details of one trained model, as the worker reports them."""
        path = f"/trained-models/{quote(model_name, safe='')}"
        _, payload = await self._request("GET", path, WorkerError)
        return payload

    async def model_download_url(self, model_name: str, bucket: Optional[str] = None) -> Dict[str, Any]:
        """Presigned GET URL for a trained model object."""
        body = {
            "bucket": bucket or settings.trained_models_bucket,
            "objectName": model_name,
            "operation": "get",
        }
        _, payload = await self._request("POST", "/presigned-url", WorkerError, json=body)
        if not isinstance(payload, dict):
            payload = {}
        return payload

    # ============================================================
    # Transport
    # ============================================================

    async def _request(
        self,
        method: str,
        path: str,
        error_cls: Type[WorkerError],
        **kwargs,
    ):
        if not self.base_url:
            raise error_cls("Worker URL is not configured")

        url = f"{self.base_url}{path}"
        logger.debug(f"Worker {method} {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Worker {method} {path} timed out after {self.timeout}s")
            raise error_cls(f"Worker request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.error(f"Worker {method} {path} failed: {e}")
            raise error_cls(f"Worker request failed: {e}") from e

        if not response.is_success:
            logger.error(f"Worker {method} {path} returned {response.status_code}")
            raise error_cls(
                f"Worker request failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise error_cls(
                "Worker returned a non-JSON response",
                status_code=response.status_code,
                body=response.text,
            ) from e

        return response.status_code, payload


# Global instance
_worker_client: Optional[WorkerClient] = None


def get_worker_client() -> WorkerClient:
    """Get singleton WorkerClient instance."""
    global _worker_client
    if _worker_client is None:
        _worker_client = WorkerClient()
    return _worker_client
