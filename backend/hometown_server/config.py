"""
Hometown Content Server — Application Configuration
=====================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by main.py and by the test fixtures (which build their own
       Settings instance pointing at a temporary site root).

Path resolution:
    DATA_FILE and UPLOAD_DIR are relative to SITE_ROOT unless absolute:

        SITE_ROOT=/srv/site            → static files served from /srv/site
        DATA_FILE=data.json            → /srv/site/data.json
        UPLOAD_DIR=uploads             → /srv/site/uploads

    With the defaults the layout matches a front-end checked out next to the
    server: index.html, admin.html, data.json and uploads/ in one directory.
"""

from pathlib import Path
from typing import FrozenSet

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Fixed listening port; not read from the environment.
SERVER_PORT = 8000

ALLOWED_UPLOAD_TYPES: FrozenSet[str] = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "audio/mpeg",
        "audio/wav",
        "audio/mp3",
    }
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for running from the site directory.
    """

    # ── Filesystem Layout ─────────────────────────────────────────────────
    # What: Directory served at "/" (front-end, admin page, anything else in it)
    site_root: str = Field(default=".")

    # What: The content document, relative to site_root unless absolute
    data_file: str = Field(default="data.json")

    # What: Upload directory, relative to site_root unless absolute
    upload_dir: str = Field(default="uploads")

    # What: Maximum accepted upload size in bytes
    # Default: 5MB = 5 * 1024 * 1024 = 5242880
    max_upload_size: int = Field(default=5_242_880, ge=1)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def _under_site_root(self, value: str) -> Path:
        path = Path(value)
        if not path.is_absolute():
            path = Path(self.site_root) / path
        return path.resolve()

    @property
    def site_root_path(self) -> Path:
        return Path(self.site_root).resolve()

    @property
    def data_file_path(self) -> Path:
        """Absolute path of the content document."""
        return self._under_site_root(self.data_file)

    @property
    def upload_dir_path(self) -> Path:
        """Absolute path of the upload directory."""
        return self._under_site_root(self.upload_dir)


# Singleton instance — imported by main.py and __main__.py
settings = Settings()
