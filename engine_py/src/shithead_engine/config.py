"""
Server settings read from the environment.
"""

import os
from typing import List

from pydantic import BaseModel, Field, field_validator


class ServerSettings(BaseModel):
    """Process-level configuration for the game server."""

    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=3000, ge=1, le=65535, description="Listen port")
    log_level: str = Field(default="info", description="Logging level name")
    reload: bool = Field(default=False, description="Reload on code changes (development)")
    static_dir: str = Field(default="public", description="Client files served at / when present")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.lower()
        if level not in {"critical", "error", "warning", "info", "debug"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "ServerSettings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 3000)),
            log_level=os.getenv("LOG_LEVEL", "info"),
            reload=os.getenv("RELOAD", "false").lower() == "true",
            static_dir=os.getenv("STATIC_DIR", "public"),
            cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
        )
