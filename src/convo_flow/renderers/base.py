"""Renderer protocol — turns a LayoutResult into a document string."""

from __future__ import annotations

from typing import Protocol

from convo_flow.layout.types import LayoutResult


class Renderer(Protocol):
    """Anything that can draw a laid-out conversation.

    Positions and edge geometry are already final in ``result``; a renderer
    only decides how nodes, step badges and edges look. An empty result
    renders to an empty string.
    """

    def render(self, result: LayoutResult) -> str: ...
