from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from urllib.parse import quote_plus
from enum import Enum

class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Environment Configuration
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # Project Information
    PROJECT_NAME: str = "Wellbee"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # Server settings
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "wellbee"
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: str = "wellbee"
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    # Security
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Video rooms (Daily.co). When the key is missing we go straight to the fallback room.
    DAILY_API_KEY: Optional[str] = None
    DAILY_API_URL: str = "https://api.daily.co/v1"
    VIDEO_PROVIDER_TIMEOUT: int = 10
    VIDEO_ROOM_TTL_MINUTES: int = 60
    VIDEO_FALLBACK_BASE_URL: str = "https://meet.jit.si"

    # Scheduling
    SLOT_GRANULARITY_MINUTES: int = 15
    DEFAULT_MAX_APPOINTMENTS_PER_DAY: int = 10

    # Metrics
    METRICS_ENABLED: bool = True

    # --- Validators & Derived Settings ---
    @field_validator("SLOT_GRANULARITY_MINUTES")
    @classmethod
    def granularity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("SLOT_GRANULARITY_MINUTES must be positive")
        return v

    @model_validator(mode="after")
    def _finalize_and_validate(self) -> "Settings":
        # Derive SQLALCHEMY_DATABASE_URI if not provided
        if not self.SQLALCHEMY_DATABASE_URI:
            safe_user = quote_plus(self.POSTGRES_USER)
            server = self.POSTGRES_SERVER
            port = self.POSTGRES_PORT
            db = self.POSTGRES_DB
            if self.POSTGRES_PASSWORD:
                safe_password = quote_plus(self.POSTGRES_PASSWORD)
                self.SQLALCHEMY_DATABASE_URI = (
                    f"postgresql://{safe_user}:{safe_password}@{server}:{port}/{db}"
                )
            else:
                self.SQLALCHEMY_DATABASE_URI = f"postgresql://{safe_user}@{server}:{port}/{db}"
        return self

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def uses_sqlite(self) -> bool:
        return self.SQLALCHEMY_DATABASE_URI.startswith("sqlite")


settings = Settings()
