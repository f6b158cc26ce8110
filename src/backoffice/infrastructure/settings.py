"""Back office settings, read from ``BACKOFFICE_*`` environment variables
or a local ``.env`` file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # =========================================================================
    # Storage
    # =========================================================================
    data_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "data",
        description="Directory holding one JSON file per collection "
        "(defaults to ./data under the working directory)",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(default="INFO")
    log_file: Path | None = Field(
        default=None,
        description="Also log to this file, rotated at 5 MB",
    )

    # =========================================================================
    # Pricing
    # =========================================================================
    currency: str = Field(default="MYR", min_length=3, max_length=3)
    freeze_parts_price_at_approval: bool = Field(
        default=False,
        description="Invoice parts at the price recorded when the request "
        "was approved instead of the part's current price",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BACKOFFICE_",
        case_sensitive=False,
        extra="ignore",
    )
