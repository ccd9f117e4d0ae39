from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: Literal["dev", "prod", "test"] = "prod"
    DEBUG: bool = False

    # App
    APP_NAME: str = "otp-relay"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = Field(default=3000, validation_alias=AliasChoices("PORT", "APP_PORT"))

    # SendGrid
    SENDGRID_API_KEY: str | None = None
    SENDGRID_SENDER: str | None = None       # verified "from" address
    SEND_TIMEOUT_SEC: float | None = None    # unset = wait for the provider indefinitely

    # CORS (everything allowed unless narrowed)
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    # Logging / Observability
    LOG_LEVEL: str = "INFO"
    METRICS_ENABLED: bool = True
    REQUEST_ID_HEADER: str = "X-Request-ID"


def get_settings() -> Settings:
    # slightly faster singleton
    global _SETTINGS_SINGLETON
    try:
        return _SETTINGS_SINGLETON  # type: ignore[name-defined]
    except NameError:
        _SETTINGS_SINGLETON = Settings()  # type: ignore[assignment]
        return _SETTINGS_SINGLETON
