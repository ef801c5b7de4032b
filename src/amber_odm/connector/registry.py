"""Connector registry — Named database settings and their cached clients.

Settings are registered once at startup; the client for a database id is
built on first use and reused for the lifetime of the registry.

Example:
    >>> registry = ConnectorRegistry()
    >>> registry.configure("main", DatabaseSettings(hosts=["http://localhost:9200"]))
    >>> client = registry.get_client("main")
    >>> client is registry.get_client("main")
    True
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from amber_odm.config.settings import DatabaseSettings
from amber_odm.connector.factory import build_client
from amber_odm.exceptions import MissingDatabaseSettings

if TYPE_CHECKING:
    from amber_odm.config.settings import Settings

logger = logging.getLogger(__name__)


def _is_empty(settings: Any) -> bool:
    if settings is None:
        return True
    if isinstance(settings, DatabaseSettings):
        return settings.is_empty()
    if isinstance(settings, Mapping):
        return len(settings) == 0
    return False


class ConnectorRegistry:
    """Registry of database settings and lazily built clients.

    Client construction is serialized by a lock, so concurrent first use of a
    database id creates exactly one client.

    Args:
        client_factory: Callable building a client from one settings entry.
    """

    def __init__(self, client_factory: Callable[[Any], Any] = build_client) -> None:
        self._settings: dict[str, Any] = {}
        self._instances: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._client_factory = client_factory

    @property
    def databases_settings(self) -> dict[str, Any]:
        """Settings per database id (mutable)."""
        return self._settings

    def configure(self, db_id: str, settings: DatabaseSettings | Mapping[str, Any]) -> None:
        """Register settings for a database id.

        Has no effect on a client that was already built for *db_id*.
        """
        if db_id in self._settings:
            logger.warning("Overwriting existing database settings: %s", db_id)
        self._settings[db_id] = settings
        logger.info("Registered database settings: %s", db_id)

    def configure_from_settings(self, settings: Settings) -> None:
        """Register every database declared in *settings*."""
        for db_id, db_settings in settings.databases.items():
            self.configure(db_id, db_settings)

    def register_client(self, db_id: str, client: Any) -> None:
        """Use an already built client for a database id."""
        with self._lock:
            self._instances[db_id] = client
        logger.info("Registered client for database: %s", db_id)

    def get_client(self, db_id: str | None) -> Any:
        """Return the client for *db_id*, building it on first use.

        Raises:
            MissingDatabaseSettings: If no non-empty settings are registered
                for *db_id*.
        """
        client = self._instances.get(db_id)
        if client is not None:
            return client

        with self._lock:
            client = self._instances.get(db_id)
            if client is None:
                db_settings = self._settings.get(db_id)
                if _is_empty(db_settings):
                    raise MissingDatabaseSettings(f"Database settings not found for {db_id}")
                client = self._client_factory(db_settings)
                self._instances[db_id] = client
                logger.info("Initialized client for database: %s", db_id)
        return client

    def close_all(self) -> None:
        """Close and forget every cached client."""
        with self._lock:
            instances = list(self._instances.items())
            self._instances.clear()
        for db_id, client in instances:
            close = getattr(client, "close", None)
            if callable(close):
                close()
            logger.info("Closed client for database: %s", db_id)

    @property
    def active_databases(self) -> list[str]:
        """Database ids with a cached client."""
        return list(self._instances.keys())


default_registry = ConnectorRegistry()


def databases_settings() -> dict[str, Any]:
    """Settings per database id of the process-wide registry."""
    return default_registry.databases_settings


def get_client(db_id: str | None) -> Any:
    """Client for *db_id* from the process-wide registry."""
    return default_registry.get_client(db_id)
