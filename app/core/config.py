"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Storage
    AVATAR_BUCKET: str = "avatars"

    # Auth
    ADMIN_CHECK_RPC: str = "check_is_admin"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Scheduler
    RECONCILE_INTERVAL_HOURS: int = 24

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins(self) -> list[str]:
        """``ALLOWED_ORIGINS`` as a list; ``*`` stays a single wildcard."""
        raw = self.ALLOWED_ORIGINS.strip()
        if raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


settings = Settings()  # type: ignore[call-arg]
