from __future__ import annotations

import json
from pathlib import Path

import pytest

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


@pytest.fixture
def italy_trip() -> dict:
    """Shared-format transcript: the eight-message branching trip plan."""
    return json.loads((EXAMPLES_DIR / "italy_trip.json").read_text(encoding="utf-8"))


@pytest.fixture
def export_regenerated() -> dict:
    """Export-format transcript with a placeholder root, a system turn and a regenerated answer."""
    return json.loads((EXAMPLES_DIR / "export_regenerated.json").read_text(encoding="utf-8"))
