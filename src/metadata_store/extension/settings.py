"""
Table Metadata Store - Extension Settings
Decides once per process whether the relational metadata store is used.

Usage:
    from metadata_store.extension.settings import get_extension_settings

    settings = get_extension_settings()
    if settings.is_active():
        url = settings.connection_url()
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Optional

from sqlalchemy.engine import URL, make_url

from ..database.schema import METADATA_SCHEMA
from ..utils.config import (
    Config, ConfigurationError,
    DB_ACTIVE, DB_DRIVER, DB_PASSWORD, DB_SCHEMA, DB_URL, DB_USER,
)
from ..utils.logger import logger


def load_driver(driver: str) -> None:
    """
    Load a SQLAlchemy dialect and its DBAPI module (e.g. 'mysql+pymysql').

    Raises:
        ConfigurationError: If the dialect or DBAPI module can't be imported
    """
    try:
        dialect_cls = URL.create(drivername=driver).get_dialect()
        dialect_cls.import_dbapi()
    except Exception as e:
        logger.error("Failed to load extension db driver", extra={
            "driver": driver,
            "error_type": type(e).__name__,
            "error_message": str(e)
        })
        raise ConfigurationError(f"Failed to load extension db driver '{driver}': {e}") from e


@dataclass(frozen=True)
class ExtensionSettings:
    """
    Resolved activation decision and connection parameters.

    Attributes:
        active: True when metadata is persisted in the relational store
        url: Database URL (credentials may be given separately)
        user: Database user
        password: Database password
        driver: SQLAlchemy 'dialect+driver' name
        schema: Database holding the metadata table (None: the URL's default)
    """
    active: bool = False
    url: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    driver: Optional[str] = None
    schema: Optional[str] = METADATA_SCHEMA

    @classmethod
    def from_config(cls, config: Config) -> 'ExtensionSettings':
        """
        Build settings from a configuration snapshot.

        Inactive unless db.active is true. When active, db.url, db.user,
        db.password and db.driver must be present and the driver must load.

        Raises:
            ConfigurationError: If active and a setting is missing or the driver fails
        """
        active = config.get_bool(DB_ACTIVE, False)
        if not active:
            logger.warning("Database management not activated", extra={
                "config_path": config.path
            })
            return cls(active=False)

        url = config.require(DB_URL)
        user = config.require(DB_USER, allow_empty=True)
        password = config.require(DB_PASSWORD, allow_empty=True)
        driver = config.require(DB_DRIVER)
        schema = config.get(DB_SCHEMA, METADATA_SCHEMA).strip() or None

        try:
            make_url(url)
        except Exception as e:
            raise ConfigurationError(f"Invalid extension db url: {e}") from e

        load_driver(driver)

        settings = cls(active=True, url=url, user=user, password=password,
                       driver=driver, schema=schema)
        logger.info("Database management activated", extra={
            "url": settings.connection_url().render_as_string(hide_password=True),
            "schema": schema
        })
        return settings

    @classmethod
    def instance(cls) -> 'ExtensionSettings':
        """Process-wide settings (see get_extension_settings)."""
        return get_extension_settings()

    def is_active(self) -> bool:
        return self.active

    def connection_url(self) -> URL:
        """
        Database URL with driver and credentials applied.

        Raises:
            ConfigurationError: If the settings are inactive
        """
        if not self.active:
            raise ConfigurationError("Database management not activated")
        url = make_url(self.url).set(drivername=self.driver)
        if self.user:
            url = url.set(username=self.user)
        if self.password:
            url = url.set(password=self.password)
        return url


# Global settings instance
_settings: Optional[ExtensionSettings] = None
_settings_lock = Lock()


def get_extension_settings(config: Optional[Config] = None) -> ExtensionSettings:
    """
    Get the process-wide extension settings.

    Thread-safe lazy initialization ensures the configuration is read and
    the driver loaded only once. A ConfigurationError leaves no instance behind.

    Args:
        config: Snapshot to build from on first call (defaults to Config.from_file())

    Returns:
        Global ExtensionSettings instance
    """
    global _settings
    if _settings is None:
        with _settings_lock:
            # Double-check locking pattern
            if _settings is None:
                _settings = ExtensionSettings.from_config(config or Config.from_file())
    return _settings


def reset_extension_settings() -> None:
    """
    Reset the global settings (useful for testing).

    The next get_extension_settings() call reads configuration again.
    """
    global _settings
    with _settings_lock:
        _settings = None
