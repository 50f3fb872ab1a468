"""Shared fixtures and helpers for tests."""

import json
from typing import Any

import pytest

from clipfix.config import Settings
from clipfix.fs import InMemoryFileSystem


# ---------------------------------------------------------------------------
# Auto-marker: tag everything under tests/ as "unit"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Entity documents
# ---------------------------------------------------------------------------


def _make_entity(
    animations: list[tuple[str, list[str]]],
    layers: list[tuple[str, list[str]]],
    keyframes: list[tuple[str, str | None]],
) -> str:
    """Serialize an entity document the way the editor writes it (code JSON-escaped)."""
    document: dict[str, Any] = {
        "animations": [{"$id": f"anim-{i}", "name": name, "layers": ids} for i, (name, ids) in enumerate(animations)],
        "layers": [{"$id": layer_id, "type": "FRAME_SCRIPT", "keyframes": ids} for layer_id, ids in layers],
        "keyframes": [
            {"$id": kf_id, "type": "FRAME_SCRIPT", **({} if code is None else {"code": code})}
            for kf_id, code in keyframes
        ],
    }
    return json.dumps(document, indent=2)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def memory_fs() -> InMemoryFileSystem:
    return InMemoryFileSystem({"project.fraytools": "{}"})


@pytest.fixture
def make_entity() -> Any:
    return _make_entity
