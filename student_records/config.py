from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent  # student-records/


class Settings(BaseSettings):
    """Application settings with validation.

    The CSRF signing secret is required and must be provided via environment
    variables or the .env file. Everything else has a sensible default.

    Uses Pydantic v2 API:
    - model_config with SettingsConfigDict
    - @field_validator decorator
    """

    # Server settings
    api_host: str = Field(min_length=1, default="127.0.0.1", description="Server host (e.g., '0.0.0.0')")
    api_port: int = Field(ge=1, le=65535, default=8000, description="Server port")

    # Security - required
    secret_key: str = Field(min_length=16, description="Secret used to sign CSRF tokens")
    csrf_max_age_seconds: int = Field(ge=60, default=7200, description="CSRF token lifetime in seconds")
    trusted_hosts: str = Field(default="localhost,127.0.0.1", description="Comma separated trusted host patterns")
    rate_limit_default: str = Field(default="120/minute", description="Default slowapi rate limit per client")

    # Presentation
    app_title: str = Field(min_length=1, default="Student Management System", description="Header title")
    per_page: int = Field(ge=1, le=100, default=10, description="Records per list page")
    placeholder_text: str = Field(default="not specified", description="Shown for absent optional fields")
    html_lang: str = Field(min_length=2, default="en", description="Document language attribute")
    text_direction: str = Field(pattern=r"^(ltr|rtl)$", default="ltr", description="Document text direction")

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,  # Validate defaults too
    )

    @field_validator("api_host", mode="after")
    @classmethod
    def validate_api_host(cls, v: str) -> str:
        """Ensure api_host is not empty or whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("api_host cannot be empty")
        return v

    @field_validator("placeholder_text", mode="after")
    @classmethod
    def validate_placeholder_text(cls, v: str) -> str:
        """Ensure the placeholder is visible text."""
        v = v.strip()
        if not v:
            raise ValueError("placeholder_text must not be empty")
        return v

    @field_validator("trusted_hosts", mode="after")
    @classmethod
    def validate_trusted_hosts(cls, v: str) -> str:
        """Ensure at least one trusted host is configured."""
        if not any(host.strip() for host in v.split(",")):
            raise ValueError("trusted_hosts must list at least one host")
        return v


# Singleton settings instance (cached for performance)
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Creates the instance once to avoid re-reading the .env file on every
    request. Use this with FastAPI's Depends().

    Returns:
        Cached Settings instance

    Example:
        @router.get("/")
        async def route(settings: Settings = Depends(get_settings)):
            return {"per_page": settings.per_page}
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
