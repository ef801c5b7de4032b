"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from amber_odm.config.settings import Settings


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with one database."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        databases={"main": {"hosts": ["http://localhost:9200"]}},
    )


@pytest.fixture
def es_client() -> MagicMock:
    """Mock Elasticsearch client with an empty search response."""
    client = MagicMock()
    client.search.return_value = {"took": 1, "hits": {"total": {"value": 0}, "hits": []}}
    return client


@pytest.fixture
def sample_hit() -> dict[str, Any]:
    """Sample hit as returned under ``hits.hits``."""
    return {
        "_index": "users",
        "_id": "user_001",
        "_score": 3.2,
        "_seq_no": 5,
        "_primary_term": 2,
        "sort": [1718409600000, "user_001"],
        "_source": {
            "name": "Jane Doe",
            "age": 41,
            "tags": ["admin", "beta"],
            "address": {"city": "Lyon", "zip": "69001"},
            "nickname": "jd",
            "_routing_hint": "internal",
        },
    }
