"""Application settings."""

from datetime import date
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    include_max_depth: int = Field(
        default=10,
        ge=1,
        description="Maximum nesting depth of !!!include()!!! directives",
    )

    file_encoding: str = Field(
        default="utf-8",
        description="Text encoding of board and include files",
    )

    today: date | None = Field(
        default=None,
        description="Override the date gather rules are evaluated against",
    )

    model_config = {
        "env_prefix": "MDBOARD_",
    }
