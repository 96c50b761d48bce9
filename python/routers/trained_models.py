"""
Trained Models API Router
Listing, details and download links for models trained by the worker.
"""

from fastapi import APIRouter, Depends

from core.responses import ApiResponse
from services.auth import get_current_user
from services.trained_models_service import TrainedModelsService

router = APIRouter()

trained_models_service_instance: TrainedModelsService = None


def set_trained_models_service(service: TrainedModelsService):
    global trained_models_service_instance
    trained_models_service_instance = service


def get_trained_models_service() -> TrainedModelsService:
    """Dependency injection for TrainedModelsService"""
    return trained_models_service_instance


@router.get("")
async def list_trained_models(
    user: dict = Depends(get_current_user),
    service: TrainedModelsService = Depends(get_trained_models_service),
):
    """Trained models for all of the current user's datasets."""
    result = await service.list_models(user["id"])
    return ApiResponse.ok(result.model_dump(by_alias=True, exclude_none=True))


@router.get("/{model_name}")
async def get_trained_model(
    model_name: str,
    user: dict = Depends(get_current_user),
    service: TrainedModelsService = Depends(get_trained_models_service),
):
    result = await service.get_model(user["id"], model_name)
    return ApiResponse.ok(result.model_dump(by_alias=True))


@router.get("/{model_name}/download")
async def download_trained_model(
    model_name: str,
    user: dict = Depends(get_current_user),
    service: TrainedModelsService = Depends(get_trained_models_service),
):
    """Presigned URL for downloading the model file."""
    result = await service.download_url(user["id"], model_name)
    return ApiResponse.ok(result.model_dump(by_alias=True))
