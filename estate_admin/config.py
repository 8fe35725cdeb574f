"""
Configuration management using Pydantic settings.
Handles database URL, photo store credentials, and environment variables for deployment.
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application configuration
    app_name: str = "Estate Admin API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Database configuration
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/estate_admin"
    auto_create_tables: bool = True

    # API configuration
    api_v1_prefix: str = "/api/v1"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Pagination defaults (admin data provider contract)
    default_page_size: int = 10

    # Photo store configuration
    photo_store_backend: str = "local"
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    cloudinary_folder: Optional[str] = None
    photo_upload_timeout: float = 30.0

    # Local photo storage
    upload_dir: str = "./uploads"
    public_base_url: str = "http://localhost:8080"
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    allowed_file_types: List[str] = ["image/jpeg", "image/png", "image/webp", "image/gif"]

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8080

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure an async driver is used."""
        if v and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v and v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("photo_store_backend")
    @classmethod
    def validate_photo_store_backend(cls, v):
        """Validate photo store backend name."""
        allowed_backends = ["local", "cloudinary"]
        v = v.lower()
        if v not in allowed_backends:
            raise ValueError(f"Photo store backend must be one of: {allowed_backends}")
        return v

    @model_validator(mode="after")
    def validate_cloudinary_credentials(self):
        """Cloudinary uploads need all three credentials."""
        if self.photo_store_backend == "cloudinary":
            missing = [
                name for name in ("cloudinary_cloud_name", "cloudinary_api_key", "cloudinary_api_secret")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(f"Missing Cloudinary settings: {', '.join(missing)}")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the app lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
