# media_gallery/config.py
"""
Runtime configuration, read from the environment and ``.env``.

Variable names are the field names in upper case (``DATA_DIRECTORY``,
``DOCUMENT_STORE_BACKEND``, ...).
"""

from pathlib import Path
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import DocumentStoreBackend, LogLevel, ObjectStoreBackend

ENVIRONMENTS = ("development", "testing", "staging", "production")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    environment: str = "development"

    # ============= HTTP =============

    api_host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    api_port: int = Field(default=8000, ge=1, le=65535)
    api_reload: bool = Field(default=False, description="uvicorn auto-reload")

    # A comma-separated CORS_ORIGINS string is accepted as well as a list
    cors_origins: Union[str, List[str]] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Origins allowed to call the API",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        if isinstance(self.cors_origins, list):
            return self.cors_origins
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ============= STORAGE =============

    document_store_backend: DocumentStoreBackend = Field(
        default=DocumentStoreBackend.MEMORY,
        description="Where metadata documents live (memory or postgres)",
    )
    object_store_backend: ObjectStoreBackend = Field(
        default=ObjectStoreBackend.FILESYSTEM,
        description="Where media binaries live (memory or filesystem)",
    )

    # Postgres document store only
    database_url: Optional[str] = Field(
        default=None, description="PostgreSQL connection string"
    )
    db_pool_min_size: int = Field(default=2, ge=1, le=50)
    db_pool_max_size: int = Field(default=10, ge=1, le=100)
    db_pool_timeout: int = Field(
        default=30, ge=5, le=300, description="Seconds to wait for a pooled connection"
    )

    data_directory: str = Field(
        default="./data", description="Root of stored objects and log files"
    )
    public_base_url: str = Field(
        default="http://127.0.0.1:8000/media",
        description="URL prefix under which the filesystem store's objects are served",
    )

    @property
    def objects_directory(self) -> str:
        return str(Path(self.data_directory) / "objects")

    @property
    def logs_directory(self) -> str:
        return str(Path(self.data_directory) / "logs")

    def ensure_directories(self) -> None:
        for directory in (self.data_directory, self.objects_directory, self.logs_directory):
            Path(directory).mkdir(parents=True, exist_ok=True)

    # ============= MEDIA PROCESSING =============

    thumbnail_max_edge: int = Field(
        default=480, ge=64, le=4096, description="Longest thumbnail edge in pixels"
    )
    thumbnail_quality: int = Field(
        default=70, ge=1, le=95, description="JPEG quality for thumbnails/posters"
    )
    full_image_quality: int = Field(
        default=90, ge=1, le=95, description="JPEG quality for full-size images"
    )
    video_poster_seek_seconds: float = Field(
        default=0.1, ge=0.0, le=60.0, description="Where the poster frame is taken"
    )
    max_concurrent_uploads: int = Field(
        default=4, ge=1, le=32, description="Files processed at once per upload"
    )

    # ============= ADMIN UX =============

    delete_confirm_timeout_seconds: float = Field(
        default=4.0,
        gt=0,
        le=300,
        description="How long an armed delete control waits for confirmation",
    )
    notification_history_size: int = Field(default=50, ge=1, le=1000)

    # ============= LOGGING =============

    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_file: Optional[str] = Field(
        default=None, description="Rotating log file; console only when unset"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        name = str(v).upper()
        if name not in LogLevel.__members__:
            raise ValueError(
                f"Invalid log level '{v}'. Expected one of: {', '.join(LogLevel.__members__)}"
            )
        return LogLevel[name]

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        environment = v.lower()
        if environment not in ENVIRONMENTS:
            raise ValueError(
                f"Invalid environment '{v}'. Expected one of: {', '.join(ENVIRONMENTS)}"
            )
        return environment


settings = Settings()
