"""Configuration for hashsync.

Settings are resolved in this order: explicit value (usually a CLI option),
environment variable, config file, built-in default. The config file is a
dotenv-style ``KEY=VALUE`` file stored at ``~/.config/hashsync/config``
unless ``HASHSYNC_CONFIG`` points elsewhere.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import HashSyncConfigError
from .utils import MAX_WORKERS

logger = logging.getLogger(__name__)

MISSING_OPTION = (
    "The option '{0}' is required but was not available in the given options."
)


class HashSyncSettings(BaseSettings):
    """Settings read from the environment and the config file.

    Field names match the environment variables, case-insensitively.
    Environment variables take precedence over the config file.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    aws_profile: Optional[str] = Field(
        default=None, description="AWS profile name used to build the session"
    )
    aws_region: Optional[str] = Field(default=None, description="AWS region")
    aws_default_region: Optional[str] = Field(
        default=None, description="Fallback AWS region"
    )
    hashsync_endpoint_url: Optional[str] = Field(
        default=None, description="Custom endpoint for S3-compatible providers"
    )
    hashsync_workers: int = Field(
        default=1, ge=1, le=MAX_WORKERS, description="Parallel upload workers"
    )
    hashsync_connect_timeout: float = Field(
        default=10.0, gt=0, description="Connect timeout in seconds"
    )
    hashsync_read_timeout: float = Field(
        default=60.0, gt=0, description="Read timeout in seconds"
    )


def _format_validation_error(error: ValidationError) -> str:
    details = []
    for item in error.errors():
        name = str(item["loc"][0]).upper() if item["loc"] else "config"
        details.append(f"{name}: {item['msg']}")
    return "Invalid configuration: " + "; ".join(details)


class Config:
    """Runtime settings for the storage connection and engine."""

    CONFIG_ENV_VAR = "HASHSYNC_CONFIG"

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Explicit config file path (defaults to
                ``$HASHSYNC_CONFIG`` or ``~/.config/hashsync/config``)
        """
        self._config_path = config_path
        self._settings: Optional[HashSyncSettings] = None

    def get_config_path(self) -> Path:
        """Return the path of the config file (which may not exist)."""
        if self._config_path is not None:
            return self._config_path
        env_path = os.environ.get(self.CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()
        return Path.home() / ".config" / "hashsync" / "config"

    @property
    def settings(self) -> HashSyncSettings:
        """Validated settings, loaded on first access.

        Raises:
            HashSyncConfigError: If a value has the wrong type or range
        """
        if self._settings is None:
            path = self.get_config_path()
            try:
                self._settings = HashSyncSettings(_env_file=path)
            except ValidationError as e:
                raise HashSyncConfigError(_format_validation_error(e)) from e
            logger.debug("Loaded settings (config file: %s)", path)
        return self._settings

    @property
    def profile(self) -> Optional[str]:
        """AWS profile name used to build the boto3 session."""
        return self.settings.aws_profile

    @property
    def region(self) -> Optional[str]:
        """AWS region of the bucket."""
        return self.settings.aws_region or self.settings.aws_default_region

    @property
    def endpoint_url(self) -> Optional[str]:
        """Custom endpoint for S3-compatible providers."""
        return self.settings.hashsync_endpoint_url

    @property
    def workers(self) -> int:
        """Number of parallel upload workers (1 means sequential)."""
        return self.settings.hashsync_workers

    @property
    def connect_timeout(self) -> float:
        """Connect timeout in seconds for storage requests."""
        return self.settings.hashsync_connect_timeout

    @property
    def read_timeout(self) -> float:
        """Read timeout in seconds for storage requests."""
        return self.settings.hashsync_read_timeout


config = Config()


@dataclass
class SyncOptions:
    """Options for a single sync run."""

    root: Optional[str]
    """Local folder to sync (absolute or relative to the working directory)"""

    bucket: Optional[str]
    """Bucket to sync into"""

    prefix: Optional[str] = None
    """Prefix prepended to every key and used to scope the listing"""

    delimiter: Optional[str] = None
    """Delimiter passed to the listing request"""

    delete: bool = False
    """Delete objects not found in the root folder"""

    dry_run: bool = False
    """Report what would be done without uploading or deleting"""

    force: bool = False
    """Upload every file regardless of change status"""

    def validate(self) -> None:
        """Check that the required options are present.

        Raises:
            HashSyncConfigError: If root or bucket is missing
        """
        if not self.root:
            raise HashSyncConfigError(MISSING_OPTION.format("root"))
        if not self.bucket:
            raise HashSyncConfigError(MISSING_OPTION.format("bucket"))
