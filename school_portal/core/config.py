from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, Field
from urllib.parse import urlparse

LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "School Portal"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = Field(default=False, description="Enable debug mode (set to false in production)")
    ENVIRONMENT: str = Field(default="production", description="Environment: development, staging, production")

    # Upstream school API
    API_BASE_URL: str = Field(default="http://localhost:8000/api", description="Base URL of the school REST API")
    API_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, description="Timeout applied to every upstream request")

    # Page behaviour
    MARK_ENTRY_BANNER_SECONDS: float = Field(default=3.0, ge=0, description="How long the marks-saved banner stays up")
    ADMIT_CARD_SIMULATED_DELAY_SECONDS: float = Field(default=2.0, ge=0, description="Delay of the admit card generation stub")

    # CORS
    FRONTEND_URL: str = "http://localhost:3000"

    # Server
    PORT: int = Field(default=8080, description="Server port")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator('API_BASE_URL')
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate upstream API URL format."""
        if not v:
            raise ValueError("API_BASE_URL is required")
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("API_BASE_URL must be a valid URL (e.g., https://school.example.com/api)")
        if parsed.scheme not in ['http', 'https']:
            raise ValueError("API_BASE_URL must use http or https protocol")
        return v.rstrip('/')

    @field_validator('FRONTEND_URL')
    @classmethod
    def validate_frontend_url(cls, v: str) -> str:
        """Validate frontend URL format."""
        if v:
            parsed = urlparse(v)
            if not parsed.scheme or not parsed.netloc:
                raise ValueError("FRONTEND_URL must be a valid URL")
        return v


def validate_settings() -> None:
    """Validate all required settings are present and valid."""
    from school_portal.core.exceptions import ConfigurationError

    global settings
    try:
        # Re-initialize settings to ensure validation
        settings = Settings()
    except Exception as e:
        error_msg = str(e)
        if "required" in error_msg.lower() or "field required" in error_msg.lower():
            raise ConfigurationError(
                f"Missing required environment variable\n"
                f"Please check your .env file and ensure all required variables are set.\n"
                f"Error: {error_msg}",
                error_code="MISSING_ENV_VAR"
            )
        raise ConfigurationError(
            f"Configuration error: {error_msg}\n"
            f"Please check your .env file configuration.",
            error_code="CONFIG_ERROR"
        )

    # a school API on this machine may stay on plain http
    api_host = urlparse(settings.API_BASE_URL).hostname
    if (
        not settings.API_BASE_URL.startswith('https://')
        and not settings.DEBUG
        and api_host not in LOCAL_HOSTS
    ):
        raise ConfigurationError(
            "API_BASE_URL should use HTTPS in production",
            error_code="INSECURE_URL"
        )


def get_settings() -> "Settings":
    """Return the current settings, loading them on first use."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


# Initialize settings and validate
try:
    settings = Settings()
except Exception as e:
    # Settings will be validated in main.py startup
    settings = None
