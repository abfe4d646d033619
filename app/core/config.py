from typing import Any, List, Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Waqf Portal"
    VERSION: str = "1.0.0"
    API_V1_PREFIX: str = "/api/v1"

    # --- Environment & Debug ---
    ENVIRONMENT: str = "local"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # --- Security ---
    SECRET_KEY: Optional[SecretStr] = None

    # --- Supabase (identity + storage) ---
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[SecretStr] = None
    SUPABASE_JWT_SECRET: Optional[SecretStr] = None
    SUPABASE_JWT_AUDIENCE: Optional[str] = "authenticated"
    SUPABASE_HTTP_TIMEOUT: int = 10
    ADMIN_ROLE: str = "admin"

    # --- Activity log ---
    AUDIT_LOG_TABLE: str = "admin_logs"
    AUDIT_LOG_DEFAULT_LIMIT: int = 100
    AUDIT_LOG_MAX_LIMIT: int = 500
    DISPLAY_TIMEZONE: str = "Asia/Jakarta"

    # --- Lazy media / gallery ---
    LAZY_MEDIA_ROOT_MARGIN_PX: int = 50
    GALLERY_COLUMNS: int = 3
    GALLERY_TILE_HEIGHT_PX: int = 240
    GALLERY_GAP_PX: int = 24
    GALLERY_FOLD_WIDTH_PX: int = 1280
    GALLERY_FOLD_HEIGHT_PX: int = 720

    # --- Storage ---
    STORAGE_BACKEND: str = "local"
    STORAGE_LOCAL_PATH: str = "storage"
    STORAGE_PUBLIC_URL: str = "http://127.0.0.1:8000/storage"
    STORAGE_MEDIA_BUCKET: str = "media"
    STORAGE_S3_ACCESS_KEY_ID: Optional[str] = None
    STORAGE_S3_SECRET_ACCESS_KEY: Optional[SecretStr] = None
    STORAGE_S3_REGION: str = "ap-southeast-1"
    MAX_UPLOAD_BYTES: int = 20 * 1024 * 1024
    ALLOWED_FILE_TYPES: List[str] = [
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/gif",
        "video/mp4",
        "video/webm",
    ]

    # --- CORS ---
    ALLOWED_ORIGINS: List[str] = Field(
        default_factory=list,
        validate_default=True,
        description="List of allowed CORS origins. Configure in .env",
    )

    # --- Database Config ---
    DB_HOST: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_PORT: Optional[str] = "5432"
    DB_NAME: Optional[str] = "postgres"

    # --- Connection Pool ---
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_PRE_PING: bool = True

    DATABASE_URL: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def default_allowed_origins(
        cls, v: Optional[List[str]], info: ValidationInfo
    ) -> Optional[List[str]]:
        env = info.data.get("ENVIRONMENT") or "local"
        if env != "production":
            if v is None:
                return ["http://localhost:5173", "http://localhost:8080"]
            if isinstance(v, str) and v.strip() in ("", "[]"):
                return ["http://localhost:5173", "http://localhost:8080"]
            if isinstance(v, list) and len(v) == 0:
                return ["http://localhost:5173", "http://localhost:8080"]
        return v

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> Any:
        if isinstance(v, str) and v:
            return v

        values = info.data
        if not values.get("DB_HOST") or not values.get("DB_USER"):
            # Local development without Supabase credentials
            return "sqlite:///./waqf_portal.db"

        user = values.get("DB_USER")
        password = quote_plus(values.get("DB_PASSWORD") or "")
        host = values.get("DB_HOST")
        port = values.get("DB_PORT", "5432")
        db = values.get("DB_NAME", "postgres")

        return f"postgresql://{user}:{password}@{host}:{port}/{db}"

    @field_validator("SECRET_KEY", mode="before")
    @classmethod
    def validate_secret_key(
        cls, v: Optional[SecretStr], info: ValidationInfo
    ) -> Optional[SecretStr]:
        env = info.data.get("ENVIRONMENT") or "local"
        if env != "local" and not v:
            raise ValueError(
                "SECRET_KEY must be set in environment for non-local deployments"
            )
        return v

    @field_validator("STORAGE_BACKEND", mode="after")
    @classmethod
    def validate_storage_backend(cls, v: str, info: ValidationInfo) -> str:
        """Block local storage in production."""
        v = v.lower()
        if v not in ("local", "s3"):
            raise ValueError("STORAGE_BACKEND must be 'local' or 's3'")
        env = info.data.get("ENVIRONMENT") or "local"
        if env == "production" and v == "local":
            raise ValueError(
                "STORAGE_BACKEND='local' is not allowed in production. Use 's3'."
            )
        return v

    @field_validator("AUDIT_LOG_DEFAULT_LIMIT", mode="after")
    @classmethod
    def validate_audit_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("AUDIT_LOG_DEFAULT_LIMIT must be positive")
        return v


settings = Settings()
