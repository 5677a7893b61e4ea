"""filedrop application configuration.

Loads settings from a YAML file (``filedrop.settings.yaml`` by default, or
the path in the ``FILEDROP_SETTINGS`` environment variable) and validates it
into pydantic models. A missing file means defaults for everything.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .envelope import DEFAULT_MAX_JSON_BYTES
from .files.schemas import DEFAULT_MAX_TOTAL_BYTES, UploadConfiguration

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("filedrop.settings.yaml")
SETTINGS_ENV_VAR = "FILEDROP_SETTINGS"


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class LoggingSettings(BaseModel):
    level: str = "info"


class UploadSettings(BaseModel):
    """Where uploads go and what they may contain."""
    upload_dir:            str       = "./uploads"
    max_total_bytes:       int       = DEFAULT_MAX_TOTAL_BYTES
    allowed_content_types: List[str] = Field(default_factory=list)
    rename:                bool      = True

    @field_validator("allowed_content_types", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return value or []

    def to_upload_configuration(self) -> UploadConfiguration:
        """Build the immutable per-request configuration."""
        return UploadConfiguration(
            max_total_bytes=self.max_total_bytes,
            allowed_content_types=self.allowed_content_types,
        )


class JSONSettings(BaseModel):
    max_bytes:            int  = DEFAULT_MAX_JSON_BYTES
    allow_unknown_fields: bool = False


class AppSettings(BaseModel):
    server:  ServerSettings  = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    uploads: UploadSettings  = Field(default_factory=UploadSettings)
    json_io: JSONSettings    = Field(default_factory=JSONSettings, alias="json")

    model_config = {"populate_by_name": True}


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_settings(path: Optional[Path] = None) -> AppSettings:
    """Load settings from YAML into a single *AppSettings* object."""
    if path is None:
        path = Path(os.environ.get(SETTINGS_ENV_VAR, SETTINGS_FILE))

    app_settings = AppSettings(**_load_yaml(Path(path)))
    logger.info(
        "Settings loaded (server=%s:%s, upload_dir=%s, max_total_bytes=%d, allowed_content_types=%s)",
        app_settings.server.host,
        app_settings.server.port,
        app_settings.uploads.upload_dir,
        app_settings.uploads.max_total_bytes,
        app_settings.uploads.allowed_content_types or "any",
    )
    return app_settings


_config: Optional[AppSettings] = None


def get_config() -> AppSettings:
    """Return the loaded settings, loading them on first use."""
    global _config
    if _config is None:
        _config = load_settings()
    return _config


def set_config(config: Optional[AppSettings]) -> None:
    """Replace the cached settings. Passing None forces a reload."""
    global _config
    _config = config
