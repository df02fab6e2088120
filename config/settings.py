"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Operator-facing agent settings (API key, seller ID, mode) are NOT stored here;
they start from the defaults below and live in AgentSettingsService.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


DEFAULT_INDIAMART_URL = "https://sellerapi.indiamart.com/catalog/v1/product/add"


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # INDIAMART
    # ===================
    indiamart_base_url: str = Field(
        default=DEFAULT_INDIAMART_URL,
        description="Catalogue endpoint used when the operator leaves base URL empty"
    )
    upload_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Transport timeout for a single upload call"
    )

    # ===================
    # QUEUE RUNNER
    # ===================
    queue_inter_item_delay_seconds: float = Field(
        default=0.6,
        ge=0,
        le=60,
        description="Pause between two dispatches"
    )
    activity_log_capacity: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Number of activity log entries kept in memory"
    )

    # ===================
    # AGENT DEFAULTS
    # ===================
    default_agent_mode: str = Field(
        default="simulate",
        pattern="^(simulate|live)$",
        description="Mode the agent starts in"
    )
    default_auto_start: bool = Field(
        default=True,
        description="Start draining as soon as something is queued"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        description="Origins allowed to call the API from a browser"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
