"""Conversation layout engine."""

from convo_flow.layout.pipeline import (
    build_edge,
    build_edges,
    layout_conversation,
    normalize_positions,
    plan_positions,
    resolve_depths,
)
from convo_flow.layout.types import (
    BranchTracker,
    EdgeDescriptor,
    LayoutAnomaly,
    LayoutConfig,
    LayoutResult,
    Point,
    PositionedNode,
)

__all__ = [
    "BranchTracker",
    "EdgeDescriptor",
    "LayoutAnomaly",
    "LayoutConfig",
    "LayoutResult",
    "Point",
    "PositionedNode",
    "build_edge",
    "build_edges",
    "layout_conversation",
    "normalize_positions",
    "plan_positions",
    "resolve_depths",
]
