"""clipcmd settings — Pydantic BaseSettings for configuration from environment and .env."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ClipCmdSettings(BaseSettings):
    """Tool locations and defaults, overridable via ``CLIPCMD_*`` environment variables."""

    # External tools
    ffmpeg_binary: str = Field(default="ffmpeg", description="Transcoding tool invocation name or path")
    ffprobe_binary: str = Field(default="ffprobe", description="Probe tool invocation name or path")

    # Edit defaults
    default_frame_rate: int = Field(default=30, ge=1, description="Output frame rate before any fps edit")

    # Concatenation
    manifest_filename: str = Field(
        default="concat.txt", min_length=1, description="Concat manifest name, written next to the first clip"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level for the CLI")

    model_config = {"env_prefix": "CLIPCMD_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}
