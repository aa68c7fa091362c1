from .handler import (
    TableMetadataHandler,
    get_table_metadata_handler,
    reset_table_metadata_handler,
)
from .settings import (
    ExtensionSettings,
    get_extension_settings,
    reset_extension_settings,
)

__all__ = [
    "ExtensionSettings",
    "TableMetadataHandler",
    "get_extension_settings",
    "get_table_metadata_handler",
    "reset_extension_settings",
    "reset_table_metadata_handler",
]
