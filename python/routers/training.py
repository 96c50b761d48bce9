"""
Training API Router
Dataset export to the worker and training control.
"""

from fastapi import APIRouter, Depends

from core.responses import ApiResponse
from core.logging import get_logger
from models.requests.training import (
    StartTrainingRequest,
    StartRunpodRequest,
    ExportToWorkerRequest,
)
from services.auth import get_current_user
from services.training_service import TrainingService

logger = get_logger(__name__)
router = APIRouter()

training_service_instance: TrainingService = None


def set_training_service(service: TrainingService):
    global training_service_instance
    training_service_instance = service


def get_training_service() -> TrainingService:
    """Dependency injection for TrainingService"""
    return training_service_instance


@router.post("/start")
async def start_training(
    request: StartTrainingRequest,
    user: dict = Depends(get_current_user),
    training_service: TrainingService = Depends(get_training_service),
):
    """
    Export the dataset's annotated images as a training archive and upload
    it through the worker, which starts training on arrival.
    """
    logger.info(f"Starting training for dataset {request.dataset_id} (user {user['id']})")
    result = await training_service.start_training(user["id"], request)
    return ApiResponse.ok(result.model_dump(by_alias=True))


@router.post("/start-runpod")
async def start_runpod(
    request: StartRunpodRequest,
    user: dict = Depends(get_current_user),
    training_service: TrainingService = Depends(get_training_service),
):
    """Start training on the worker from an already uploaded dataset."""
    result = await training_service.start_runpod(request)
    return ApiResponse.ok(result.model_dump(by_alias=True))


@router.get("/status/{training_id}")
async def get_training_status(
    training_id: str,
    user: dict = Depends(get_current_user),
    training_service: TrainingService = Depends(get_training_service),
):
    """Training status as reported by the worker."""
    status = await training_service.training_status(training_id)
    return ApiResponse.ok(status)


@router.post("/export-to-worker")
async def export_to_worker(
    request: ExportToWorkerRequest,
    user: dict = Depends(get_current_user),
    training_service: TrainingService = Depends(get_training_service),
):
    """Pass a client-built dataset ZIP through to the worker without starting training."""
    result = await training_service.export_to_worker(user["id"], request)
    return ApiResponse.ok(result)
