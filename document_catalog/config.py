"""Configuration for the document catalog service."""

from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.upload import ValidationConfig

PACKAGE_DIR = Path(__file__).resolve().parent
ROOT_DIR = PACKAGE_DIR.parent


class Settings(BaseSettings):
    """Configuration for the document catalog service."""

    # Service metadata
    SERVICE_NAME: str = "Document Catalog Service"
    SERVICE_VERSION: str = "1.0.0"
    APP_HOST: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "APP_HOST"),
    )
    APP_PORT: int = Field(
        default=8210,
        validation_alias=AliasChoices("PORT", "APP_PORT"),
    )
    APP_ENV: str = "development"
    DEBUG: bool = Field(
        default=True,
        validation_alias=AliasChoices("DEBUG", "APP_DEBUG"),
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Path = Path("logs")
    LOG_TO_FILE: bool = True

    # CORS
    CORS_ORIGINS: str = "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    # Upload validation
    MAX_FILE_SIZE_BYTES: int = Field(default=10 * 1024 * 1024, validation_alias="MAX_FILE_SIZE_BYTES")
    ALLOWED_MIME_TYPES: List[str] = Field(
        default=[
            "application/pdf",
            "image/jpeg",
            "image/jpg",
            "image/png",
            "image/gif",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "text/plain",
        ]
    )
    MAX_FILES_PER_BATCH: int = Field(default=10, validation_alias="MAX_FILES_PER_BATCH")

    # Transfer simulation
    UPLOAD_MIN_DURATION_SECONDS: float = 1.0
    UPLOAD_MAX_DURATION_SECONDS: float = 4.0
    UPLOAD_PROGRESS_TICK_SECONDS: float = 0.2
    UPLOAD_MAX_PROGRESS_INCREMENT: int = 15
    UPLOAD_FAILURE_RATE: float = 0.05
    COMPLETED_TASK_TTL_SECONDS: Optional[float] = 3.0

    # Catalog
    DEFAULT_UPLOADER: str = "Current User"
    SEED_SAMPLE_DOCUMENTS: bool = True
    NOTIFICATION_HISTORY_SIZE: int = 100

    model_config = SettingsConfigDict(
        env_file=[str(PACKAGE_DIR / ".env"), str(ROOT_DIR / ".env")],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def log_dir_path(self) -> Path:
        log_dir = Path(self.LOG_DIR)
        if log_dir.is_absolute():
            return log_dir
        return (ROOT_DIR / log_dir).resolve()

    @property
    def validation_config(self) -> ValidationConfig:
        return ValidationConfig(
            max_size_bytes=self.MAX_FILE_SIZE_BYTES,
            allowed_mime_types=frozenset(self.ALLOWED_MIME_TYPES),
            max_files=self.MAX_FILES_PER_BATCH,
        )


settings = Settings()
