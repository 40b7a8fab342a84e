"""
Configuration for the Dify datasets client.

Values are resolved from Django settings when a Django project has
configured them, and from environment variables otherwise. A local
``.env`` file is loaded into the environment on import.
"""

import os

from django.conf import settings
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import DifyConfigurationError

load_dotenv()

DEFAULT_BASE_URL = "https://api.dify.ai/v1"
DEFAULT_CONNECT_TIMEOUT_MS = 5000
DEFAULT_READ_TIMEOUT_MS = 60000
DEFAULT_WRITE_TIMEOUT_MS = 60000

# Config field -> (setting name, default)
SETTING_NAMES = {
    "base_url": ("DIFY_BASE_URL", DEFAULT_BASE_URL),
    "api_key": ("DIFY_DATASET_API_KEY", None),
    "connect_timeout_ms": ("DIFY_CONNECT_TIMEOUT_MS", DEFAULT_CONNECT_TIMEOUT_MS),
    "read_timeout_ms": ("DIFY_READ_TIMEOUT_MS", DEFAULT_READ_TIMEOUT_MS),
    "write_timeout_ms": ("DIFY_WRITE_TIMEOUT_MS", DEFAULT_WRITE_TIMEOUT_MS),
}


def get_setting(name: str, default=None):
    """
    Look up a setting by name.

    Django settings win when configured and non-empty; the environment is
    consulted next.
    """
    if settings.configured:
        value = getattr(settings, name, None)
        if value is not None:
            return value
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def get_int_setting(name: str, default: int) -> int:
    """Get a setting as an integer."""
    value = get_setting(name, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise DifyConfigurationError(
            f"Setting {name} must be an integer, got {value!r}", config_key=name
        )


class DifyConfig(BaseModel):
    """
    Connection settings for a datasets client.

    Timeouts are expressed in milliseconds.
    """

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Service API base URL")
    api_key: str = Field(..., description="Dataset API key (sent as a bearer token)")
    connect_timeout_ms: int = Field(
        default=DEFAULT_CONNECT_TIMEOUT_MS, gt=0, description="Connect timeout (ms)"
    )
    read_timeout_ms: int = Field(
        default=DEFAULT_READ_TIMEOUT_MS, gt=0, description="Read timeout (ms)"
    )
    write_timeout_ms: int = Field(
        default=DEFAULT_WRITE_TIMEOUT_MS, gt=0, description="Write timeout (ms)"
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def connect_timeout(self) -> float:
        return self.connect_timeout_ms / 1000

    @property
    def read_timeout(self) -> float:
        return self.read_timeout_ms / 1000

    @property
    def write_timeout(self) -> float:
        return self.write_timeout_ms / 1000

    @classmethod
    def from_settings(cls, **overrides) -> "DifyConfig":
        """
        Build a config from Django settings / environment variables.

        Settings are only read for fields that are not overridden, so a
        malformed value in the environment does not affect explicit config.

        Args:
            **overrides: Explicit values that take precedence over settings

        Raises:
            DifyConfigurationError: If no API key can be resolved or a
                resolved value is invalid
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        for field, (name, default) in SETTING_NAMES.items():
            if field in values:
                continue
            if field.endswith("_timeout_ms"):
                values[field] = get_int_setting(name, default)
            else:
                values[field] = get_setting(name, default)

        if not values["api_key"]:
            raise DifyConfigurationError(
                "Dify dataset API key is required", config_key="DIFY_DATASET_API_KEY"
            )
        try:
            return cls(**values)
        except ValidationError as e:
            error = e.errors()[0]
            field = error["loc"][0] if error["loc"] else None
            name = SETTING_NAMES.get(field, (field, None))[0]
            raise DifyConfigurationError(
                f"Invalid setting {name}: {error['msg']}", config_key=name
            ) from e
