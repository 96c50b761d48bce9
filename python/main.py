"""
Edge Mind API - Main Entry Point

This is the FastAPI application entry point.
Uses core/ for configuration, exceptions, and logging.
"""

from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

# Core imports
from core.config import settings, VERSION
from core.exceptions import AppException, ValidationError
from core.responses import ApiResponse
from core.logging import setup_logging, get_logger, log_error

# Setup logging first
setup_logging(level="INFO" if not settings.debug else "DEBUG")
logger = get_logger(__name__)

# Service imports
from infrastructure.dataset_storage import get_dataset_storage
from infrastructure.worker_client import get_worker_client
from services.database import PostgresClient
from services.training_service import TrainingService
from services.trained_models_service import TrainedModelsService
from services import auth

# Router imports
from routers import training, annotations, trained_models

# ============================================================
# Application Setup
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool on startup, close it on shutdown."""
    await db.connect()
    try:
        yield
    finally:
        await db.disconnect()


app = FastAPI(
    lifespan=lifespan,
    title="Edge Mind API",
    description="Annotation export and training dispatch",
    version=VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# ============================================================
# CORS Configuration
# ============================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

logger.info(f"CORS middleware configured for {settings.cors_origins}")

# ============================================================
# Global Exception Handlers
# ============================================================

@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """
    Handle all custom AppException and subclasses.
    Returns unified ApiResponse format.
    """
    logger.warning(f"AppException: {exc.code} - {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.from_exception(exc).model_dump()
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body/query did not validate. Field errors go to details."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg"),
        }
        for error in exc.errors()
    ]
    validation_error = ValidationError(
        "Request validation failed",
        field=errors[0]["field"] if errors else None,
        errors=errors
    )
    return JSONResponse(
        status_code=validation_error.status_code,
        content=ApiResponse.from_exception(validation_error).model_dump()
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected exceptions.
    Logs full traceback and returns generic error.
    """
    log_error(logger, exc, context=f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ApiResponse.fail(
            message="Internal server error",
            code="INTERNAL_ERROR"
        ).model_dump()
    )

# ============================================================
# Service Initialization (Dependency Injection)
# ============================================================

logger.info(f"Starting Edge Mind API v{VERSION}")
logger.info("Creating singleton service instances...")

# 1. Database client (pool opens on startup)
db = PostgresClient()

# 2. Training service
training_service = TrainingService(
    db=db,
    storage=get_dataset_storage(),
    worker=get_worker_client(),
)
logger.info("✓ Created TrainingService")

# 3. Trained models service
trained_models_service = TrainedModelsService(db=db, worker=get_worker_client())
logger.info("✓ Created TrainedModelsService")

# 4. Inject services into routers
auth.set_database(db)
training.set_training_service(training_service)
trained_models.set_trained_models_service(trained_models_service)
annotations.set_services(db)
logger.info("✓ Service instances injected into all routers")

# ============================================================
# Root Endpoints
# ============================================================

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return ApiResponse.ok({"message": "Edge Mind API is running!"}).model_dump()

# ============================================================
# Router Registration
# ============================================================

app.include_router(training.router, prefix="/api/training", tags=["training"])
app.include_router(annotations.router, prefix="/api/annotations", tags=["annotations"])
app.include_router(trained_models.router, prefix="/api/trained-models", tags=["trained-models"])

logger.info(f"Application startup complete. Running on {settings.server_host}:{settings.server_port}")

# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug
    )
