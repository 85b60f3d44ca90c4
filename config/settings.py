from pydantic_settings import BaseSettings, SettingsConfigDict


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
class Settings(BaseSettings):
    """
    Application settings managed by Pydantic.
    Reads from environment variables and/or .env file.
    """
    # Project Info
    API_TITLE: str = "UBER Hypermedia API"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # UBER rendering
    UBER_VERSION: str = "1.0"
    UBER_MEDIA_TYPE: str = "application/vnd.amundsen-uber+json"

    # Fail fast on self-referential object graphs instead of recursing forever
    DETECT_CYCLES: bool = True

    # Config to read from .env file if available
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
        )

settings = Settings()
