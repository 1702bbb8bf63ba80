"""Shared fixtures for the layerconf test suite."""

from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def service_tree() -> dict[str, Any]:
    return {
        "service": {"name": "billing", "debug": False},
        "db": {"host": "db.internal", "port": 5432, "timeout": "2.5"},
        "endpoints": [
            {"name": "primary", "url": "https://a.example"},
            {"name": "backup", "url": "https://b.example"},
        ],
        "ports": {"8080": "http"},
    }
