"""
Settings for the command line tool itself.

Environment variable mapping:
- LAYERED_CONFIG_LOG_LEVEL -> log_level
- LAYERED_CONFIG_LOG_FORMAT -> log_format
- LAYERED_CONFIG_LOG_FILE -> log_file
"""

import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "LAYERED_CONFIG_"


class ToolSettings(BaseModel):
    """Logging configuration of the ``layered-config`` tool."""

    model_config = ConfigDict(extra="forbid")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level"
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format"
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Log file path (None for stderr only)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_format(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "ToolSettings":
        """Build settings from LAYERED_CONFIG_* variables; unset ones keep defaults."""
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for field_name in cls.model_fields:
            raw = env.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw:
                values[field_name] = raw
        return cls(**values)
