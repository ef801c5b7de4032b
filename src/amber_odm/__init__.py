"""amber_odm — Map Elasticsearch documents onto typed pydantic models."""

from amber_odm.config.settings import DatabaseSettings, Settings
from amber_odm.connector.registry import ConnectorRegistry, databases_settings, default_registry, get_client
from amber_odm.exceptions import (
    AmberODMError,
    ConfigurationError,
    IllegalArgumentException,
    MissingDatabaseSettings,
    ReservedField,
    UnknownWriteFieldException,
)
from amber_odm.models.container import AttrContainer
from amber_odm.models.document import Document
from amber_odm.version import __version__

__all__ = [
    "AmberODMError",
    "AttrContainer",
    "ConfigurationError",
    "ConnectorRegistry",
    "DatabaseSettings",
    "Document",
    "IllegalArgumentException",
    "MissingDatabaseSettings",
    "ReservedField",
    "Settings",
    "UnknownWriteFieldException",
    "__version__",
    "databases_settings",
    "default_registry",
    "get_client",
]
