"""Integration test fixtures — Elasticsearch backend with mock data.

Expects a cluster reachable at ``AMBER_ODM_TEST_ES_URL`` (default
``http://localhost:9200``), for example:

    docker run -p 9200:9200 -e discovery.type=single-node \
        -e xpack.security.enabled=false docker.elastic.co/elasticsearch/elasticsearch:8.15.0

Seed data is loaded on first use; tests are skipped when the cluster is down.
"""

from __future__ import annotations

import os
import time
from typing import Any

import httpx
import pytest

ES_URL = os.environ.get("AMBER_ODM_TEST_ES_URL", "http://localhost:9200")
INDEX = "amber-odm-test-users"

MOCK_USERS: list[dict[str, Any]] = [
    {
        "id": "user-001",
        "name": "Alice Johnson",
        "age": 34,
        "tags": ["admin", "ops"],
        "address": {"city": "Lyon", "zip": "69001", "country": "FR"},
        "nickname": "ali",
    },
    {
        "id": "user-002",
        "name": "Bob Smith",
        "age": 41,
        "tags": ["dev"],
        "address": {"city": "Nice", "zip": "06000"},
    },
    {
        "id": "user-003",
        "name": "Carol Zhang",
        "age": 29,
        "tags": ["dev", "ops"],
        "address": {"city": "Paris", "zip": "75001"},
    },
]


def _wait_for_service(url: str, timeout: float = 10.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(1)
    return False


def _seed_elasticsearch(host: str, index: str) -> None:
    with httpx.Client(base_url=host, timeout=30) as client:
        client.delete(f"/{index}", params={"ignore_unavailable": "true"})

        mapping = {
            "mappings": {
                "properties": {
                    "name": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
                    "age": {"type": "integer"},
                    "tags": {"type": "keyword"},
                    "address": {"type": "object"},
                    "nickname": {"type": "keyword"},
                }
            }
        }
        resp = client.put(f"/{index}", json=mapping)
        resp.raise_for_status()

        for user in MOCK_USERS:
            body = {k: v for k, v in user.items() if k != "id"}
            resp = client.put(f"/{index}/_doc/{user['id']}", json=body)
            resp.raise_for_status()

        client.post(f"/{index}/_refresh")


@pytest.fixture(scope="session")
def elasticsearch_ready() -> str:
    """Ensure Elasticsearch is running and seeded."""
    if not _wait_for_service(ES_URL):
        pytest.skip(f"Elasticsearch not available at {ES_URL}")
    _seed_elasticsearch(ES_URL, INDEX)
    return ES_URL
