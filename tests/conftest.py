"""Shared fixtures for tree2mjml tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

FIXTURE_DIR = Path(__file__).parent / "fixtures"
SAMPLE_JSON = FIXTURE_DIR / "sample.json"


@pytest.fixture
def sample_data() -> dict[str, Any]:
    """The saved-template shape: ``{"name": ..., "elements": [...]}``."""
    return json.loads(SAMPLE_JSON.read_text(encoding="utf-8"))
