"""Runtime configuration helpers for the SimplifAI backend."""

from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    AWS_REGION: str
    COGNITO_USER_POOL_ID: str
    COGNITO_CLIENT_ID: str
    COGNITO_SECRET: Optional[str] = None
    USER_TABLE: str = "SimplifAIUsers"
    FILE_TABLE: str = "SimplifAIFileMetadata"
    UPLOAD_BUCKET: str = "simplifai-uploads-us-east-1"
    PROCESSING_QUEUE_URL: str = ""
    PRESIGN_EXPIRES_SECONDS: int = 900
    OTP_TTL_SECONDS: int = 600
    OTP_MAX_ATTEMPTS: int = 5
    OPERATOR_GROUP: str = "admin"
    SENDGRID_API_KEY: Optional[str] = None
    SENDGRID_SENDER: Optional[str] = None
    ALLOWED_ORIGIN: str = "*"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def COGNITO_ISSUER(self) -> str:
        return f"https://cognito-idp.{self.AWS_REGION}.amazonaws.com/{self.COGNITO_USER_POOL_ID}"

    @property
    def COGNITO_JWKS_URL(self) -> str:
        return f"{self.COGNITO_ISSUER}/.well-known/jwks.json"


_settings: Optional[Settings] = None


def set_settings(settings: Settings) -> None:
    """Set the singleton settings instance used across the application."""

    global _settings
    _settings = settings


def get_settings() -> Settings:
    """Return the active settings instance, loading it from the environment if needed."""

    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


class SettingsProxy:
    """Lazy proxy that defers attribute access to the active settings instance."""

    def __getattr__(self, item: str):  # type: ignore[override]
        return getattr(get_settings(), item)


settings = SettingsProxy()

__all__ = ["Settings", "get_settings", "set_settings", "settings"]
