"""processposter configuration: loaded from .env via pydantic-settings."""

from pydantic_settings import BaseSettings
from pydantic import Field


class PosterSettings(BaseSettings):
    """All processposter configuration. Reads from .env file and environment variables."""

    # --- Capture API ---
    capture_api_url: str = Field(
        default="http://localhost/CaptureApi/api",
        description="Capture API base URL",
    )
    capture_username: str = Field(
        default="",
        description="User the Basic authorization header is built from",
    )
    capture_password: str = Field(
        default="",
        description="Password for capture_username",
    )
    capture_timeout: float = Field(
        default=120.0,
        description="Transport timeout in seconds for every Capture API call",
    )

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="console",
        description="Log format: 'console' for dev, 'json' for production",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton: import this everywhere
settings = PosterSettings()
