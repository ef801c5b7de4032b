"""Client factory — Build a search client from database settings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from elasticsearch import Elasticsearch

from amber_odm.config.settings import SUPPORTED_BACKENDS, DatabaseSettings
from amber_odm.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def build_client(settings: DatabaseSettings | Mapping[str, Any]) -> Any:
    """Create a client for *settings*.

    ``DatabaseSettings`` select the client library through ``backend``. A plain
    mapping is passed as keyword arguments to ``Elasticsearch``.

    Raises:
        ConfigurationError: If the backend is unknown, the settings have an
            unsupported type, or the OpenSearch client is not installed.
    """
    if isinstance(settings, DatabaseSettings):
        backend = settings.backend
        kwargs = settings.client_kwargs()
    elif isinstance(settings, Mapping):
        backend = "elasticsearch"
        kwargs = dict(settings)
    else:
        raise ConfigurationError(f"Unsupported database settings type: {type(settings).__name__}")

    if backend == "opensearch":
        return _build_opensearch(kwargs)
    if backend != "elasticsearch":
        raise ConfigurationError(f"Unknown backend '{backend}'. Supported backends: {list(SUPPORTED_BACKENDS)}")

    logger.debug("Creating Elasticsearch client for hosts: %s", kwargs.get("hosts"))
    return Elasticsearch(**kwargs)


def _build_opensearch(kwargs: dict[str, Any]) -> Any:
    try:
        from opensearchpy import OpenSearch
    except ImportError as e:
        raise ConfigurationError(
            "opensearch-py package is required.  Install with: pip install amber-odm[opensearch]"
        ) from e

    logger.debug("Creating OpenSearch client for hosts: %s", kwargs.get("hosts"))
    return OpenSearch(**kwargs)
