"""Tests for the SVG renderer."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from convo_flow.layout import LayoutResult, layout_conversation
from convo_flow.messages import Message, Role
from convo_flow.renderers import Renderer, SvgRenderer
from convo_flow.renderers.svg import snippet

SVG_NS = "{http://www.w3.org/2000/svg}"


def render(messages: list[Message]) -> tuple[LayoutResult, ET.Element]:
    result = layout_conversation(messages)
    return result, ET.fromstring(SvgRenderer().render(result))


def branching() -> list[Message]:
    return [
        Message("m1", Role.USER, "Plan a trip"),
        Message("m2", Role.ASSISTANT, "Rome or Florence?", "m1"),
        Message("m3", Role.USER, "Rome", "m2"),
        Message("m5", Role.USER, "Florence", "m2"),
    ]


class TestSnippet:
    def test_short_text_unchanged(self):
        assert snippet("hello") == "hello"

    def test_long_text_cut_with_ellipsis(self):
        text = "x" * 40
        assert snippet(text) == "x" * 30 + "…"

    def test_whitespace_collapsed(self):
        assert snippet("a\n\nb   c") == "a b c"


class TestSvgRenderer:
    def test_satisfies_protocol(self):
        renderer: Renderer = SvgRenderer()
        assert renderer.render(LayoutResult()) == ""

    def test_root_element_and_size(self):
        result, root = render(branching())
        width, height = result.canvas_size()
        assert root.tag == f"{SVG_NS}svg"
        assert root.get("width") == str(int(width))
        assert root.get("height") == str(int(height))

    def test_one_group_per_node(self):
        result, root = render(branching())
        groups = root.findall(f"{SVG_NS}g")
        assert [g.get("data-id") for g in groups] == [n.id for n in result.nodes]
        assert groups[0].get("class") == "node role-user"

    def test_one_path_per_edge(self):
        result, root = render(branching())
        paths = [p for p in root.iter(f"{SVG_NS}path") if "edge" in (p.get("class") or "")]
        assert [p.get("d") for p in paths] == [e.path_data() for e in result.edges]

    def test_branch_markers_match_branch_edges(self):
        result, root = render(branching())
        markers = [c for c in root.iter(f"{SVG_NS}circle") if c.get("class") == "branch-marker"]
        assert len(markers) == sum(e.is_branch for e in result.edges)
        assert markers, "m2 → m5 should be drawn as a branch"

    def test_edge_color_follows_target_role(self):
        result, root = render(branching())
        paths = [p for p in root.iter(f"{SVG_NS}path") if "edge" in (p.get("class") or "")]
        for path, edge in zip(paths, result.edges):
            expected = "#9CA3AF" if edge.is_user_message else "#10B981"
            assert path.get("stroke") == expected

    def test_content_is_escaped(self):
        svg = SvgRenderer().render(layout_conversation([Message("a", Role.USER, '<script>"x" & y')]))
        assert "<script>" not in svg
        assert "&lt;script&gt;" in svg
        ET.fromstring(svg)

    def test_step_badges(self):
        _, root = render(branching())
        steps = [
            t.text for t in root.iter(f"{SVG_NS}text") if t.get("font-weight") == "bold"
        ]
        assert steps == ["1", "2", "3", "4"]
