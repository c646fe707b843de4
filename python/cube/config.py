"""Cube client configuration.

CubeConfig is the struct the client consumes. It can be built directly by
the caller or loaded from the environment through CubeSettings.

Environment Configuration:
    CUBE_ENABLE: Whether the Cube backend is enabled (default false)
    CUBE_BASE_URL: Service endpoint, e.g. https://cube.example.com
    CUBE_API_KEY: Application key sent as the `Key` header
    CUBE_DEFAULT_BUCKET_KEY: Business identifier of the default bucket
    CUBE_DEFAULT_BUCKET_NAME: Default bucket name (required for upload/delete)
    CUBE_TIMEOUT_S: HTTP timeout in seconds (default 10)
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from cube.errors import ConfigurationError

DEFAULT_TIMEOUT_S = 10.0


class CubeConfig(BaseModel):
    """Connection parameters for the Cube storage service.

    Mutable so the client can substitute the default timeout once, at
    construction time, when timeout_s is not positive.
    """

    enabled: bool = False
    base_url: str = ""
    api_key: str = Field(default="", repr=False)
    default_bucket_key: str = ""
    default_bucket_name: str = ""
    timeout_s: float = DEFAULT_TIMEOUT_S


class CubeSettings(BaseSettings):
    """Cube configuration loaded from environment variables."""

    enabled: bool = Field(default=False, alias="CUBE_ENABLE")
    base_url: str = Field(default="", alias="CUBE_BASE_URL")
    api_key: str = Field(default="", alias="CUBE_API_KEY", repr=False)
    default_bucket_key: str = Field(default="", alias="CUBE_DEFAULT_BUCKET_KEY")
    default_bucket_name: str = Field(default="", alias="CUBE_DEFAULT_BUCKET_NAME")
    timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, alias="CUBE_TIMEOUT_S")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def to_config(self) -> CubeConfig:
        """Build the client-facing config struct."""
        return CubeConfig(
            enabled=self.enabled,
            base_url=self.base_url,
            api_key=self.api_key,
            default_bucket_key=self.default_bucket_key,
            default_bucket_name=self.default_bucket_name,
            timeout_s=self.timeout_s,
        )


def validate_config(config: CubeConfig | None) -> CubeConfig:
    """Validate a config for client construction.

    Substitutes DEFAULT_TIMEOUT_S when timeout_s is zero or negative.

    Raises:
        ConfigurationError: If config is None or base_url is empty.
    """
    if config is None:
        raise ConfigurationError("Cube config must not be None")
    if not config.base_url:
        raise ConfigurationError("Cube base_url is not configured")

    if config.timeout_s <= 0:
        config.timeout_s = DEFAULT_TIMEOUT_S

    return config


@lru_cache
def get_settings() -> CubeSettings:
    """Get cached Cube settings loaded from the environment."""
    return CubeSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
