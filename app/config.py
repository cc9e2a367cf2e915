"""Application settings for the Task Management API."""
from functools import lru_cache
from typing import List
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from a local .env when present
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


class FeatureFlags(BaseModel):
    """Optional features. Placeholders only, nothing in the core reads them."""

    model_config = {"frozen": True}

    task_notifications: bool = True
    task_attachments: bool = False
    task_comments: bool = False
    advanced_filtering: bool = True
    task_analytics: bool = True


class Settings(BaseModel):
    """Process-wide configuration, immutable once loaded."""

    model_config = {"frozen": True}

    app_name: str = "Task Management API"
    version: str = "1.0.0"
    environment: str = "development"
    log_level: str = "INFO"
    frontend_url: str = "http://localhost:3000"

    # Database
    database_url: str = "sqlite:///./task_management.db"
    database_echo: bool = False

    # Application tokens
    jwt_secret_key: str = Field(default="change-me-in-production-please-32b", min_length=16)
    jwt_issuer: str = "task-management-api"
    jwt_audience: str = "task-management-client"
    jwt_expiration_minutes: int = 60
    jwt_clock_skew_seconds: int = 0

    # Azure AD OAuth
    azure_ad_client_id: str = ""
    azure_ad_client_secret: str = ""
    azure_ad_tenant_id: str = "common"
    azure_ad_instance: str = "https://login.microsoftonline.com/"
    azure_ad_redirect_uri: str = "http://localhost:8000/api/auth/callback"

    feature_flags: FeatureFlags = Field(default_factory=FeatureFlags)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def azure_ad_token_endpoint(self) -> str:
        instance = self.azure_ad_instance.rstrip("/")
        return f"{instance}/{self.azure_ad_tenant_id}/oauth2/v2.0/token"

    @property
    def allowed_origins(self) -> List[str]:
        if self.is_production:
            return [self.frontend_url]
        origins = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ]
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


def load_settings() -> Settings:
    """Build settings from environment variables."""
    defaults = Settings()
    return Settings(
        environment=os.environ.get("ENVIRONMENT", defaults.environment),
        log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
        frontend_url=os.environ.get("FRONTEND_URL", defaults.frontend_url),
        database_url=os.environ.get("DATABASE_URL", defaults.database_url),
        database_echo=_env_bool("DATABASE_ECHO", defaults.database_echo),
        jwt_secret_key=os.environ.get("JWT_SECRET_KEY", defaults.jwt_secret_key),
        jwt_issuer=os.environ.get("JWT_ISSUER", defaults.jwt_issuer),
        jwt_audience=os.environ.get("JWT_AUDIENCE", defaults.jwt_audience),
        jwt_expiration_minutes=_env_int("JWT_EXPIRATION_MINUTES", defaults.jwt_expiration_minutes),
        jwt_clock_skew_seconds=_env_int("JWT_CLOCK_SKEW_SECONDS", defaults.jwt_clock_skew_seconds),
        azure_ad_client_id=os.environ.get("AZURE_AD_CLIENT_ID", defaults.azure_ad_client_id),
        azure_ad_client_secret=os.environ.get("AZURE_AD_CLIENT_SECRET", defaults.azure_ad_client_secret),
        azure_ad_tenant_id=os.environ.get("AZURE_AD_TENANT_ID", defaults.azure_ad_tenant_id),
        azure_ad_instance=os.environ.get("AZURE_AD_INSTANCE", defaults.azure_ad_instance),
        azure_ad_redirect_uri=os.environ.get("AZURE_AD_REDIRECT_URI", defaults.azure_ad_redirect_uri),
        feature_flags=FeatureFlags(
            task_notifications=_env_bool("FEATURE_TASK_NOTIFICATIONS", True),
            task_attachments=_env_bool("FEATURE_TASK_ATTACHMENTS", False),
            task_comments=_env_bool("FEATURE_TASK_COMMENTS", False),
            advanced_filtering=_env_bool("FEATURE_ADVANCED_FILTERING", True),
            task_analytics=_env_bool("FEATURE_TASK_ANALYTICS", True),
        ),
    )


@lru_cache
def get_settings() -> Settings:
    """Settings for this process. Loaded on first use, then reused."""
    return load_settings()
