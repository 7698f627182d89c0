#!/usr/bin/env python3
"""
League Archive Configuration
Reads connection settings from the environment and an optional .env file
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass

from core.errors import mask_credentials
from core.archiver import DEFAULT_PROGRESS_INTERVAL

logger = logging.getLogger(__name__)


@dataclass
class ArchiveConfig:
    """League archive settings"""

    # Connection settings
    mysql_url: Optional[str] = None
    sqlite_db: Optional[str] = None

    # Runtime settings
    log_level: Optional[str] = None
    progress_interval: Optional[int] = None

    def __post_init__(self):
        """Fill unset fields from environment variables"""
        if self.mysql_url is None:
            self.mysql_url = os.environ.get('MYSQL_URL')
        if self.sqlite_db is None:
            self.sqlite_db = os.environ.get('SQLITE_DB')

        if self.log_level is None:
            self.log_level = os.environ.get('LEAGUE_ARCHIVE_LOG_LEVEL', 'INFO')
        self.log_level = self.log_level.upper()

        if self.progress_interval is None:
            self.progress_interval = DEFAULT_PROGRESS_INTERVAL
            interval = os.environ.get('LEAGUE_ARCHIVE_PROGRESS_INTERVAL')
            if interval:
                try:
                    self.progress_interval = int(interval)
                except ValueError:
                    logger.warning(f"Ignoring invalid LEAGUE_ARCHIVE_PROGRESS_INTERVAL: {interval!r}")

    def validate(self) -> List[str]:
        """Return the names of required settings that are missing."""
        missing = []
        if not self.mysql_url:
            missing.append('MYSQL_URL')
        if not self.sqlite_db:
            missing.append('SQLITE_DB')
        return missing

    def get_safe_dict(self) -> Dict[str, Any]:
        """Get configuration as dict without the MySQL password"""
        return {
            'mysql_url': mask_credentials(self.mysql_url) if self.mysql_url else None,
            'sqlite_db': self.sqlite_db,
            'log_level': self.log_level,
            'progress_interval': self.progress_interval,
        }


def load_env_file(env_file: Path) -> None:
    """Load variables from a .env file.

    Only sets values for keys not already in os.environ, so exported
    variables take precedence over the file.
    """
    with open(env_file, 'r') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#') and '=' in line:
                key, value = line.split('=', 1)
                key = key.strip()
                if key.startswith('export '):
                    key = key[len('export '):].strip()
                value = value.strip().strip('"').strip("'")
                if key not in os.environ:
                    os.environ[key] = value


def load_config(env_file: Optional[Path] = None, **overrides) -> ArchiveConfig:
    """Build the configuration.

    Priority (highest to lowest):
    1. Explicit overrides (command-line arguments)
    2. Environment variables
    3. .env file
    4. ArchiveConfig defaults
    """
    path = Path(env_file) if env_file else Path.cwd() / '.env'
    if path.exists():
        load_env_file(path)
    elif env_file:
        raise FileNotFoundError(f"Env file not found: {path}")

    return ArchiveConfig(**{k: v for k, v in overrides.items() if v is not None})
