"""Runtime configuration read from ROUTE_SKETCH_* environment variables."""

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "ROUTE_SKETCH_"


def default_store_path() -> Path:
    return Path.home() / ".cache" / "route-sketch" / "routes.json"


class Settings(BaseModel):
    store_path: Optional[Path] = Field(default_factory=default_store_path)
    principal: Optional[str] = None
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "route-sketch/1.0"
    geocode_timeout: float = Field(default=10.0, gt=0)
    search_radius_km: float = Field(default=5.0, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("store_path", mode="before")
    @classmethod
    def memory_store(cls, v):
        # "memory" keeps routes in-process only
        if isinstance(v, str) and v.strip().lower() in ("", "memory", ":memory:"):
            return None
        return v

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """Build settings from the environment, ignoring unset variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls(**values)
