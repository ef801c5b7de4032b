"""Connector layer — Database settings and search clients."""

from amber_odm.connector.factory import build_client
from amber_odm.connector.registry import ConnectorRegistry, default_registry

__all__ = ["ConnectorRegistry", "build_client", "default_registry"]
