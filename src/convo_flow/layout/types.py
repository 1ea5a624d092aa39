"""Layout IR — types shared by the layout pipeline and the renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from convo_flow.messages import Role

# ─── Geometry Defaults (pixels) ───────────────────────────────────────────────

BASE_MARGIN: int = 100  # x of depth-0 nodes
H_SPACING: int = 350  # x step per depth level
INITIAL_Y: int = 150  # y of the first root, before normalization
V_SPACING: int = 200  # row step for roots and linear continuations
TOP_MARGIN: int = 100  # min y after normalization
USER_BRANCH_STEP: int = 80
ASSISTANT_BRANCH_STEP: int = 150
CONTINUATION_DEPTH_LIMIT: int = 2  # continuation only for depth < this
NODE_SIZE: int = 100  # node circle diameter
CONTROL_OFFSET: int = 50  # Bezier control point distance from each endpoint
BRANCH_THRESHOLD: float = 0.75  # fraction of V_SPACING
CANVAS_PADDING: int = 50
MIN_CANVAS_W: int = 800
MIN_CANVAS_H: int = 400
MAX_DEPTH: int = 10_000  # depth guard against runaway parent chains


@dataclass(frozen=True)
class LayoutConfig:
    """Tunable constants for one layout run. Defaults reproduce the stock diagram."""

    base_margin: float = BASE_MARGIN
    horizontal_spacing: float = H_SPACING
    initial_y: float = INITIAL_Y
    vertical_spacing: float = V_SPACING
    top_margin: float = TOP_MARGIN
    user_branch_step: float = USER_BRANCH_STEP
    assistant_branch_step: float = ASSISTANT_BRANCH_STEP
    continuation_depth_limit: int = CONTINUATION_DEPTH_LIMIT
    node_size: float = NODE_SIZE
    control_offset: float = CONTROL_OFFSET
    branch_threshold: float = BRANCH_THRESHOLD
    canvas_padding: float = CANVAS_PADDING
    min_canvas_width: float = MIN_CANVAS_W
    min_canvas_height: float = MIN_CANVAS_H
    max_depth: int = MAX_DEPTH

    @property
    def node_radius(self) -> float:
        return self.node_size / 2

    @property
    def branch_distance(self) -> float:
        """Vertical parent/child distance above which an edge is a branch."""
        return self.vertical_spacing * self.branch_threshold

    def branch_step(self, role: Role) -> float:
        return self.user_branch_step if role is Role.USER else self.assistant_branch_step


# ─── Positions ────────────────────────────────────────────────────────────────


@dataclass
class Point:
    """A 2D point in pixel coordinates."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class BranchTracker:
    """Per-parent placement state, alive for a single layout run.

    last_y: y most recently given to a child of this parent.
    offset: accumulated signed displacement of the parent's branch children.
    """

    last_y: float
    offset: float = 0

    def advance(self, step: float) -> float:
        """Fan out one more branch: grow |offset| by ``step`` and flip its sign.

        0 → +s1 → -(s1+s2) → +(s1+s2+s3) …, so successive branches land on
        alternating sides of the parent's row and never on a row already used.
        """
        if self.offset > 0:
            self.offset = -(self.offset + step)
        else:
            self.offset = -self.offset + step
        return self.offset


@dataclass
class PositionedNode:
    """A message placed on the canvas. ``position`` is the node centre."""

    id: str
    role: Role
    content: str
    step: int
    position: Point

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "content": self.content,
            "step": self.step,
            "position": self.position.to_dict(),
        }


# ─── Edges ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class EdgeDescriptor:
    """A cubic Bezier connector from a parent node to one of its children.

    The curve runs start → end with control points ``control1`` / ``control2``
    pulled horizontally away from each endpoint.
    """

    id: str
    source: str
    target: str
    is_user_message: bool
    source_position: Point
    target_position: Point
    start: Point
    end: Point
    control1: Point
    control2: Point
    is_branch: bool

    @property
    def midpoint(self) -> Point:
        """Point halfway between start and end (marker placement)."""
        return Point(
            x=self.start.x + (self.end.x - self.start.x) / 2,
            y=(self.start.y + self.end.y) / 2,
        )

    def path_data(self) -> str:
        """SVG path ``d`` attribute for the curve."""
        s, c1, c2, e = (
            f"{format_coord(p.x)} {format_coord(p.y)}" for p in (self.start, self.control1, self.control2, self.end)
        )
        return f"M {s} C {c1}, {c2}, {e}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "isUserMessage": self.is_user_message,
            "isBranch": self.is_branch,
            "sourcePosition": self.source_position.to_dict(),
            "targetPosition": self.target_position.to_dict(),
            "path": self.path_data(),
        }


def format_coord(value: float) -> str:
    """Format a coordinate without a trailing '.0' for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


# ─── Result ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LayoutAnomaly:
    """A non-fatal placement problem, e.g. a child seen before its parent."""

    message_id: str
    parent_id: str | None
    reason: str


@dataclass
class LayoutResult:
    """Everything a renderer needs: nodes, edges and the raw position table."""

    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[EdgeDescriptor] = field(default_factory=list)
    positions: dict[str, Point] = field(default_factory=dict)
    anomalies: list[LayoutAnomaly] = field(default_factory=list)
    config: LayoutConfig = field(default_factory=LayoutConfig)

    def canvas_size(self) -> tuple[float, float]:
        """(width, height) of a canvas that fully contains every node."""
        cfg = self.config
        reach = cfg.node_radius + cfg.canvas_padding
        width = max((p.x + reach for p in self.positions.values()), default=0)
        height = max((p.y + reach for p in self.positions.values()), default=0)
        return max(cfg.min_canvas_width, width), max(cfg.min_canvas_height, height)

    def to_dict(self) -> dict[str, Any]:
        width, height = self.canvas_size()
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "width": width,
            "height": height,
            "anomalies": [
                {"id": a.message_id, "parent_id": a.parent_id, "reason": a.reason} for a in self.anomalies
            ],
        }
