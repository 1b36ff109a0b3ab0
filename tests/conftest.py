"""Shared fixtures: sample collections and the asyncio backend for anyio tests."""
from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def contacts():
    return [
        {"id": 1, "name": "Maria Lopez", "address": "123 Main St, Indiana", "age": 34},
        {"id": 2, "name": "James Carter", "address": "48 Lake Shore Dr, Chicago", "age": 52},
        {"id": 3, "name": "Priya Shah", "address": "900 Meridian St, Indianapolis", "age": 27},
        {"id": 4, "name": "Tom Becker", "address": "12 indiana avenue, Lafayette"},
    ]


@pytest.fixture
def movies():
    return [
        {"id": 1, "title": "Parasite", "director": "Bong Joon-ho", "year": 2019, "genre": "Thriller", "rating": 8.5},
        {"id": 2, "title": "Spirited Away", "director": "Hayao Miyazaki", "year": 2001, "genre": "Animation", "rating": 8.6},
    ]


@pytest.fixture
def write_json(tmp_path):
    """Write a payload to tmp_path/name and return the path."""

    def _write(name: str, payload) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
