"""
Application configuration via Pydantic Settings.
Loads from environment variables with validation and defaults.
"""

import os
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # === Server ===
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(default=5000, alias="SERVER_PORT")
    debug: bool = Field(default=False, alias="DEBUG")
    
    # === Database ===
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    
    # === CORS ===
    allowed_origins: str = Field(default="http://localhost:5173", alias="ALLOWED_ORIGINS")
    
    # === Paths ===
    uploads_dir: str = Field(default="uploads", alias="UPLOADS_DIR")
    
    # === JWT (for auth) ===
    jwt_secret: str = Field(default="fallback-secret-key", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expiration_days: int = Field(default=7, alias="JWT_EXPIRATION_DAYS")
    
    # === Training worker ===
    worker_url: Optional[str] = Field(default=None, alias="WORKER_URL")
    worker_timeout_seconds: float = Field(default=120.0, alias="WORKER_TIMEOUT_SECONDS")
    worker_bucket: str = Field(default="datasets", alias="WORKER_BUCKET")
    trained_models_bucket: str = Field(default="trained-models", alias="TRAINED_MODELS_BUCKET")
    
    # === Label export ===
    # Boxes are normalized against these, not the stored image size
    label_reference_width: int = Field(default=640, alias="LABEL_REFERENCE_WIDTH")
    label_reference_height: int = Field(default=640, alias="LABEL_REFERENCE_HEIGHT")
    
    @property
    def datasets_dir(self) -> str:
        """Directory holding one sub-folder of images per dataset."""
        return os.path.join(self.uploads_dir, "datasets")
    
    @property
    def cors_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS into list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra env vars


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
