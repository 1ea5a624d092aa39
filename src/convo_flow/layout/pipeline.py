"""Layout pipeline — conversation tree to positioned nodes and curved edges.

Phases:
  1. Depth resolution   (distance of each message from its root)
  2. Position planning  (x from depth, y from per-parent branch trackers)
  3. Normalization      (shift so the topmost node sits on the top margin)
  4. Edge building      (Bezier connectors from the final positions)

The diagram reads left-to-right as time and top-to-bottom as alternative
paths: depth is always horizontal, and only divergence points fan out
vertically.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from convo_flow.errors import CyclicParentError, DepthLimitError
from convo_flow.graph import build_children_index
from convo_flow.layout.types import (
    MAX_DEPTH,
    BranchTracker,
    EdgeDescriptor,
    LayoutAnomaly,
    LayoutConfig,
    LayoutResult,
    Point,
    PositionedNode,
)
from convo_flow.messages import Message

logger = logging.getLogger(__name__)

# ─── Depth Resolution ─────────────────────────────────────────────────────────


def resolve_depths(messages: Sequence[Message], max_depth: int = MAX_DEPTH) -> dict[str, int]:
    """Compute the tree depth of every message.

    A root (no parent_id) has depth 0; any other message is one deeper than its
    parent. A parent id naming no message in the list counts as a depth-0 root,
    so its orphaned child gets depth 1.

    The parent chain is walked with an explicit list rather than recursion, and
    every depth found along the way is memoized, so the whole pass is linear in
    the number of messages and forward references are fine.

    Raises:
        CyclicParentError: a parent chain revisits one of its own messages.
        DepthLimitError: a chain is deeper than ``max_depth``.
    """
    parent_of: dict[str, str | None] = {m.id: m.parent_id for m in messages}
    depths: dict[str, int] = {}

    for message in messages:
        if message.id in depths:
            continue

        chain: list[str] = []
        on_chain: set[str] = set()
        current = message.id
        while True:
            if current in depths:
                base = depths[current]
                break
            if current in on_chain:
                raise CyclicParentError(
                    f"cyclic parent chain through {current!r}",
                    message_id=current,
                )
            chain.append(current)
            on_chain.add(current)

            parent = parent_of[current]
            if not parent:
                base = -1
                break
            if parent not in parent_of:
                base = 0
                break
            current = parent

        if base + len(chain) > max_depth:
            raise DepthLimitError(
                f"message {message.id!r} is deeper than the limit of {max_depth}",
                message_id=message.id,
            )

        for offset, node_id in enumerate(reversed(chain), start=1):
            depths[node_id] = base + offset

    return depths


# ─── Position Planning ────────────────────────────────────────────────────────


def plan_positions(
    messages: Sequence[Message],
    depths: dict[str, int],
    children: dict[str, list[str]],
    cfg: LayoutConfig,
) -> tuple[dict[str, Point], list[LayoutAnomaly]]:
    """Assign a (pre-normalization) centre point to every message.

    Messages are visited in feed order; a parent is expected to be placed
    before its children. Placement cases:

    - Root: stacked on the linear column, ``vertical_spacing`` apart.
    - Linear continuation (first child of its parent and shallower than
      ``continuation_depth_limit``): one row below the parent's last child.
    - Branch (every other child): the parent's y plus the tracker's
      accumulated offset, which alternates sign per branch.
    - Orphan (parent not placed yet): degraded linear placement, recorded as
      a LayoutAnomaly instead of aborting the run.
    """
    positions: dict[str, Point] = {}
    trackers: dict[str, BranchTracker] = {}
    anomalies: list[LayoutAnomaly] = []
    linear_y = cfg.initial_y

    for message in messages:
        depth = depths[message.id]
        x = cfg.base_margin + depth * cfg.horizontal_spacing

        if depth == 0:
            y = linear_y
            linear_y += cfg.vertical_spacing
            positions[message.id] = Point(x=x, y=y)
            continue

        parent_id = message.parent_id
        parent_pos = positions.get(parent_id) if parent_id else None

        if parent_pos is None:
            logger.warning(
                "parent %r of message %r has no position yet; placing it on the linear column",
                parent_id,
                message.id,
            )
            anomalies.append(
                LayoutAnomaly(
                    message_id=message.id,
                    parent_id=parent_id,
                    reason="parent position missing",
                )
            )
            y = linear_y
            linear_y += cfg.vertical_spacing
            positions[message.id] = Point(x=x, y=y)
            continue

        tracker = trackers.get(parent_id)
        if tracker is None:
            tracker = trackers[parent_id] = BranchTracker(last_y=parent_pos.y)

        siblings = children.get(parent_id, [])
        is_first_child = bool(siblings) and siblings[0] == message.id

        if is_first_child and depth < cfg.continuation_depth_limit:
            y = tracker.last_y + cfg.vertical_spacing
        else:
            y = parent_pos.y + tracker.advance(cfg.branch_step(message.role))
        tracker.last_y = y

        positions[message.id] = Point(x=x, y=y)

    return positions, anomalies


# ─── Normalization ────────────────────────────────────────────────────────────


def normalize_positions(positions: dict[str, Point], top_margin: float) -> float:
    """Shift every point vertically so the minimum y equals ``top_margin``.

    Runs once, after all placements: branch offsets may push nodes above the
    margin and the minimum is only known at the end. Returns the adjustment
    applied (0 for an empty table).
    """
    if not positions:
        return 0
    adjustment = top_margin - min(p.y for p in positions.values())
    for point in positions.values():
        point.y += adjustment
    return adjustment


# ─── Edge Building ────────────────────────────────────────────────────────────


def build_edge(
    parent_id: str,
    child: Message,
    source: Point,
    target: Point,
    cfg: LayoutConfig,
) -> EdgeDescriptor:
    """Connector leaving the parent's right edge and entering the child's left edge."""
    r = cfg.node_radius
    start = Point(x=source.x + r, y=source.y)
    end = Point(x=target.x - r, y=target.y)
    return EdgeDescriptor(
        id=f"e{parent_id}-{child.id}",
        source=parent_id,
        target=child.id,
        is_user_message=child.is_user,
        source_position=Point(x=source.x, y=source.y),
        target_position=Point(x=target.x, y=target.y),
        start=start,
        end=end,
        control1=Point(x=start.x + cfg.control_offset, y=start.y),
        control2=Point(x=end.x - cfg.control_offset, y=end.y),
        is_branch=abs(target.y - source.y) > cfg.branch_distance,
    )


def build_edges(
    messages: Sequence[Message],
    positions: dict[str, Point],
    cfg: LayoutConfig,
) -> list[EdgeDescriptor]:
    """One edge per message whose parent is in the list, in feed order."""
    known = {m.id for m in messages}
    edges: list[EdgeDescriptor] = []
    for message in messages:
        parent_id = message.parent_id
        if not parent_id or parent_id not in known:
            continue
        source = positions.get(parent_id)
        target = positions.get(message.id)
        if source is None or target is None:
            continue
        edges.append(build_edge(parent_id, message, source, target, cfg))
    return edges


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


def layout_conversation(
    messages: Sequence[Message],
    cfg: LayoutConfig | None = None,
) -> LayoutResult:
    """Run the full layout pipeline. Every call starts from fresh state."""
    cfg = cfg or LayoutConfig()
    if not messages:
        return LayoutResult(config=cfg)

    depths = resolve_depths(messages, cfg.max_depth)
    children = build_children_index(messages)
    positions, anomalies = plan_positions(messages, depths, children, cfg)
    adjustment = normalize_positions(positions, cfg.top_margin)

    nodes = [
        PositionedNode(
            id=m.id,
            role=m.role,
            content=m.content,
            step=step,
            position=positions[m.id],
        )
        for step, m in enumerate(messages, start=1)
    ]
    edges = build_edges(messages, positions, cfg)

    logger.debug(
        "laid out %d nodes, %d edges (y adjustment %s, %d anomalies)",
        len(nodes),
        len(edges),
        adjustment,
        len(anomalies),
    )
    return LayoutResult(
        nodes=nodes,
        edges=edges,
        positions=positions,
        anomalies=anomalies,
        config=cfg,
    )
