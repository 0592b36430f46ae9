"""Configuration management using Pydantic Settings."""

from datetime import date

from beartype import beartype
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with immutable configuration."""

    model_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        env_prefix="WORKCOMP_",
        frozen=True,
        validate_default=True,
        extra="forbid",
    )

    # API Configuration
    app_name: str = Field(
        default="Workers' Compensation Rating Service",
        description="Application name",
        min_length=1,
    )
    api_host: str = Field(
        default="0.0.0.0",  # nosec B104 - Binding to all interfaces is needed for containerized deployment
        description="API host to bind to",
    )
    api_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="API port to bind to",
    )
    api_env: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="API environment",
    )
    api_cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins",
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )

    # Rating
    default_effective_date: date = Field(
        default=date(2024, 1, 1),
        description="Rating period used when a request carries no effective date",
    )
    expected_loss_ratio: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description=(
            "Share of manual premium used as expected annual losses for the "
            "experience mod. Pending actuarial review."
        ),
    )
    reference_lookup_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=60.0,
        description="Deadline for a single rate or territory lookup",
    )
    reference_data_path: str | None = Field(
        default=None,
        description="JSON file with class code rates and territories",
    )
    enable_risk_scoring: bool = Field(
        default=True,
        description="Attach the 0-100 risk score to rating results",
    )

    # OpenAI (Optional)
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key for premium optimization narratives",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls: type["Settings"], v: object) -> object:
        """Accept lower-case level names from the environment."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("api_cors_origins")
    @classmethod
    def validate_cors_origins(cls: type["Settings"], v: list[str]) -> list[str]:
        """Validate CORS origins are proper URLs."""
        for origin in v:
            if not origin.startswith(("http://", "https://")):
                raise ValueError(f"Invalid CORS origin: {origin}")
        return v

    @field_validator("openai_api_key")
    @classmethod
    def validate_openai_key(
        cls: type["Settings"], v: str | None, info: ValidationInfo
    ) -> str | None:
        """Reject placeholder keys in production."""
        if v and "api_env" in info.data and info.data["api_env"] == "production":
            if v.startswith("test-"):
                raise ValueError(
                    "Test OpenAI key cannot be used in production. "
                    "Set WORKCOMP_OPENAI_API_KEY environment variable."
                )
        return v

    @property
    @beartype
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.api_env == "production"

    @property
    @beartype
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.api_env == "development"


_settings: Settings | None = None


@beartype
def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


@beartype
def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    global _settings
    _settings = None
