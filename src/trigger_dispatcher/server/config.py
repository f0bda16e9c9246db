"""Configuration for the recording endpoint stub."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for the local recording endpoint.

    The stub only records what it receives; it does not talk to any
    acquisition hardware.
    """

    max_records: int = Field(
        default=10_000,
        gt=0,
        description="Oldest received triggers are dropped beyond this count.",
    )

    # Dev-friendly CORS so browser-based experiments can post directly.
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="TRIGGER_SERVER_", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
