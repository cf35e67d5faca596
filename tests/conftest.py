from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests.unit.helpers import make_registry, sample_payload


@pytest.fixture
def registry():
    return make_registry(sample_payload())


@pytest.fixture
def write_document(tmp_path: Path):
    """Return a helper that writes a JSON document into a temp location."""

    def _write(payload, name: str = "data.json") -> Path:
        path = tmp_path / name
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
