"""Configuration for the trigger dispatcher.

Configuration is loaded from:
- environment variables (prefixed with ``TRIGGER_``)
- and a local `.env` file (if present)

Every field can also be passed explicitly, which is how tests and the
trigger manager build their settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000


class TriggerSettings(BaseSettings):
    """Settings for the dispatch engine and CLI.

    Environment variables:
    - TRIGGER_HOST, TRIGGER_PORT, TRIGGER_SCHEME
    - TRIGGER_VERBOSE, TRIGGER_LOW_LATENCY, TRIGGER_SKIP_RESPONSE
    - TRIGGER_TIMEOUT_SECONDS
    - TRIGGER_MAPPINGS_PATH
    - TRIGGER_LOG_LEVEL

    Notes:
        ``skip_response`` only takes effect when ``low_latency`` is enabled.
    """

    host: str = Field(default=DEFAULT_HOST, description="Recording endpoint host")
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536, description="Recording endpoint port")
    scheme: Literal["http", "https"] = Field(default="http", description="URL scheme")

    verbose: bool = Field(
        default=False,
        description="Timestamp and log every dispatch attempt",
    )
    low_latency: bool = Field(
        default=False,
        description="Use the reused-buffer send path",
    )
    skip_response: bool = Field(
        default=False,
        description="Return before the network call completes (low-latency mode only)",
    )

    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Transport timeout for a single request",
    )

    mappings_path: str = Field(
        default="triggerMappings.json",
        description="Mapping document location: a file path or an http(s) URL",
    )

    log_level: str = Field(default="INFO", description="Root logging level")

    model_config = SettingsConfigDict(
        env_prefix="TRIGGER_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def mappings_file(self) -> Path:
        """The mapping location interpreted as a local path."""

        return Path(self.mappings_path)
