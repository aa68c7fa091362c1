"""
Table Metadata Store - Configuration Management
Loads the extension properties file (via python-dotenv) and layers
environment-variable overrides on top of it.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

# Properties file consumed by the extension
DEFAULT_CONFIG_FILE_PATH = 'etc/extension.properties'
CONFIG_FILE_ENV_VAR = 'EXTENSION_CONFIG_FILE'

# Configuration keys
DB_URL = 'db.url'
DB_USER = 'db.user'
DB_PASSWORD = 'db.password'
DB_DRIVER = 'db.driver'
DB_ACTIVE = 'db.active'
DB_SCHEMA = 'db.schema'

# Logging configuration
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class Config:
    """
    Configuration snapshot with two layers:
    - Properties file: key=value lines read once at construction
    - Environment: DB_URL overrides db.url, DB_PASSWORD overrides db.password, ...
    """

    def __init__(self, properties: Optional[Mapping[str, Optional[str]]] = None,
                 path: Optional[str] = None):
        self.path = path
        self._properties: Dict[str, str] = {
            key: value for key, value in (properties or {}).items() if value is not None
        }

    @classmethod
    def from_file(cls, path: Optional[str] = None) -> 'Config':
        """
        Load configuration from a properties file.

        Args:
            path: File to read; defaults to $EXTENSION_CONFIG_FILE or etc/extension.properties

        Returns:
            Config snapshot (empty if the file does not exist)
        """
        path = path or os.getenv(CONFIG_FILE_ENV_VAR, DEFAULT_CONFIG_FILE_PATH)
        if not Path(path).is_file():
            logging.warning(
                f"Extension properties file '{path}' not found. "
                f"Continuing with environment overrides only."
            )
            return cls({}, path=path)
        return cls(dotenv_values(path, interpolate=False), path=path)

    @staticmethod
    def env_name(key: str) -> str:
        """Environment variable that overrides a property key (db.url -> DB_URL)."""
        return key.upper().replace('.', '_')

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration value from the environment or the properties file.

        Args:
            key: Property key name (e.g. 'db.url')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = os.getenv(self.env_name(key))
        if value is not None:
            return value
        return self._properties.get(key, default)

    def require(self, key: str, allow_empty: bool = False) -> str:
        """
        Fetch a configuration value that must be present.

        Raises:
            ConfigurationError: If the key is missing (or blank, unless allow_empty)
        """
        value = self.get(key)
        if value is None or (not allow_empty and not value.strip()):
            source = self.path or 'configuration'
            raise ConfigurationError(
                f"Required parameter '{key}' not found in {source}. "
                f"Set it in the properties file or via ${self.env_name(key)}."
            )
        return value

    def get_bool(self, key: str, default: bool) -> bool:
        """
        Get configuration value as boolean.

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            True only for 'true' (any case), default if key not found
        """
        value = self.get(key, str(default))
        if value is None:
            return default
        return value.strip().lower() == 'true'

    def as_dict(self) -> Dict[str, str]:
        """Properties-file values (without environment overrides)."""
        return dict(self._properties)


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded or is incomplete."""
    pass
