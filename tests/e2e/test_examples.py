"""End-to-end: every example transcript renders through the API and the CLI."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from convo_flow.api import layout_transcript, render_svg
from convo_flow.cli import main

EXAMPLES_DIR = Path(__file__).parent.parent.parent / "examples"
EXAMPLES = sorted(EXAMPLES_DIR.glob("*.json"))


@pytest.mark.parametrize("path", EXAMPLES, ids=[p.stem for p in EXAMPLES])
def test_example_renders(path: Path) -> None:
    """Each example lays out with one edge per non-root message and renders valid SVG."""
    text = path.read_text(encoding="utf-8")
    result = layout_transcript(text)
    assert result.anomalies == []
    assert len(result.edges) == len(result.nodes) - 1
    assert min(p.y for p in result.positions.values()) == result.config.top_margin

    root = ET.fromstring(render_svg(text))
    assert root.tag.endswith("svg")


@pytest.mark.parametrize("path", EXAMPLES, ids=[p.stem for p in EXAMPLES])
def test_cli_writes_svg(path: Path, tmp_path: Path) -> None:
    out = tmp_path / "flow.svg"
    assert main([str(path), "-o", str(out)]) == 0
    assert out.read_text(encoding="utf-8").startswith("<svg")


def test_cli_json_output(capsys) -> None:
    assert main([str(EXAMPLES_DIR / "italy_trip.json"), "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert len(payload["nodes"]) == 8
    assert len(payload["edges"]) == 7
    branch = {(e["source"], e["target"]): e["isBranch"] for e in payload["edges"]}
    assert branch[("message_2", "message_5")] is True
    assert branch[("message_4", "message_7")] is False


def test_cli_spacing_flags(capsys) -> None:
    assert main([str(EXAMPLES_DIR / "italy_trip.json"), "--format", "json", "--h-spacing", "100"]) == 0
    payload = json.loads(capsys.readouterr().out)
    xs = sorted({n["position"]["x"] for n in payload["nodes"]})
    assert xs == [100 + 100 * d for d in range(6)]


def test_cli_rejects_bad_transcript(tmp_path: Path, capsys) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text('{"title": "nothing here"}', encoding="utf-8")
    assert main([str(bad)]) == 1
    assert "unrecognised transcript" in capsys.readouterr().err


def test_cli_rejects_cycle(tmp_path: Path, capsys) -> None:
    cyclic = {
        "linear_conversation": [
            {"id": "a", "parent": "b", "message": {"author": {"role": "user"}, "content": {"parts": ["a"]}}},
            {"id": "b", "parent": "a", "message": {"author": {"role": "assistant"}, "content": {"parts": ["b"]}}},
        ]
    }
    path = tmp_path / "cycle.json"
    path.write_text(json.dumps(cyclic), encoding="utf-8")
    assert main([str(path)]) == 1
    assert "cyclic" in capsys.readouterr().err


def test_cli_missing_file(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "nope.json")]) == 1
    err = capsys.readouterr().err
    assert err.startswith("error: cannot read")
    assert "nope.json" in err


def test_cli_malformed_nodes(tmp_path: Path, capsys) -> None:
    """Loosely shaped nodes lay out, and an unusable mapping exits 1 with a message."""
    loose = {
        "linear_conversation": [
            {"id": 1, "message": {"author": {"role": "user"}, "content": "hi"}},
            {"id": 2, "parent": 1, "message": {"author": "assistant", "content": {"parts": ["hello"]}}},
        ]
    }
    path = tmp_path / "loose.json"
    path.write_text(json.dumps(loose), encoding="utf-8")
    assert main([str(path), "--format", "json"]) == 0
    assert len(json.loads(capsys.readouterr().out)["edges"]) == 1

    broken = tmp_path / "broken.json"
    broken.write_text('{"mapping": {"x": null}}', encoding="utf-8")
    assert main([str(broken)]) == 1
    assert capsys.readouterr().err.startswith("error:")
