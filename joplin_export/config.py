from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # Set to True for machine-readable output

    # Export options file used by the command line host
    SETTINGS_FILE: Optional[str] = "joplin_export.yaml"

    # Timeout applied by the HTTP transport to every Joplin request
    REQUEST_TIMEOUT_SECONDS: float = 30.0


settings = Settings()
