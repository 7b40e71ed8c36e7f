from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Pydantic Settings automatically reads env vars matching field names (case-insensitive).
    In development, it also reads from .env file if present.
    List fields are read as JSON, e.g. ACCEPTED_MEDIA_TYPES='["application/json"]'.
    """

    app_name: str = "apierrors"

    # Header carrying the request ID in both directions
    request_id_header: str = "X-Request-ID"

    # Body media types accepted by endpoints guarded with require_media_type
    accepted_media_types: list[str] = ["application/json"]

    # Send the raw message of unhandled exceptions to clients (never in production)
    expose_unhandled_messages: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env in development
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


settings = Settings()
