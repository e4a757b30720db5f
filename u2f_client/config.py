"""Configuration for the U2F client."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Runtime settings for device acquisition and the challenge loop."""

    model_config = SettingsConfigDict(env_prefix="U2F_CLIENT_")

    max_open_retries: int = Field(
        default=10,
        ge=1,
        description="Attempts made to open an attached device before giving up",
    )
    retry_delay: float = Field(
        default=0.2,
        ge=0,
        description="Seconds to wait between device open attempts",
    )
    challenge_timeout: float = Field(
        default=25.0,
        gt=0,
        description="Seconds the user has to touch the device",
    )
    poll_interval: float = Field(
        default=0.25,
        gt=0,
        description="Seconds between authenticate requests sent to the device",
    )
