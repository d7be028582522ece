"""Application Configuration"""

from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Bill Mate Backend"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600

    # Security & Authentication
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000"
    ALLOWED_METHODS: str = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
    ALLOWED_HEADERS: str = "*"

    # Billing & scheduling
    TIMEZONE: str = "Asia/Bangkok"
    DEFAULT_DUE_DAY: int = Field(5, ge=1, le=31)
    AMOUNT_MATCH_TOLERANCE: float = 0.01
    OVERDUE_DEDUP_HOURS: int = 24
    NOTIFICATION_RETENTION_DAYS: int = 30

    # Email (Resend)
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "Bill Mate <onboarding@resend.dev>"

    # Storage (Cloudflare R2 – S3-compatible)
    STORAGE_PUBLIC_BASE_URL: str = "https://storage.billmate.local"
    R2_ACCOUNT_ID: str = ""
    R2_ACCESS_KEY_ID: str = ""
    R2_SECRET_ACCESS_KEY: str = ""
    R2_BUCKET_NAME: str = "billmate"
    MAX_SLIP_BYTES: int = 5 * 1024 * 1024

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        validate_default=True,
    )

    @field_validator("ALLOWED_ORIGINS", "ALLOWED_METHODS")
    @classmethod
    def split_csv(cls, v: str) -> List[str]:
        """Parse a comma-separated value into a list"""
        return [item.strip() for item in v.split(",") if item.strip()]

    @field_validator("TIMEZONE")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """Due dates and reminder windows are computed in this zone, so it must resolve"""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT.lower() == "production"


# Global settings instance
settings = Settings()
