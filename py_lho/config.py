"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from LHO_* environment variables or .env."""

    model_config = SettingsConfigDict(env_prefix="LHO_", env_file=".env", extra="ignore")

    # Search
    max_cells: int = Field(
        default=9,
        ge=1,
        description=(
            "Largest rows * cols accepted by the CLI and API. Search time grows "
            "exponentially with the tile count: 3x3 takes seconds, 3x4 about a minute"
        ),
    )
    use_transposition_table: bool = Field(
        default=True, description="Skip grid states that were already fully explored"
    )

    # API
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")


settings = Settings()
