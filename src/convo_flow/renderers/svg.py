"""SVG renderer — renders Layout IR to SVG string."""

from __future__ import annotations

from convo_flow.layout.types import EdgeDescriptor, LayoutResult, PositionedNode, format_coord
from convo_flow.messages import Role

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 14
FONT_FAMILY = "Inter, system-ui, sans-serif"
SNIPPET_LEN = 30
BADGE_RADIUS = 12
BRANCH_MARKER_RADIUS = 8

_NODE_FILL: dict[Role, str] = {
    Role.USER: "#4F46E5",
    Role.ASSISTANT: "#16A34A",
}
_ROLE_NAME: dict[Role, str] = {
    Role.USER: "User",
    Role.ASSISTANT: "Assistant",
}
_EDGE_USER = "#9CA3AF"
_EDGE_ASSISTANT = "#10B981"
_BRANCH_FILL = "#CA8A04"
_EDGE_DASH = 'stroke-dasharray="5 5"'


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


def snippet(content: str, limit: int = SNIPPET_LEN) -> str:
    """First ``limit`` characters of a message on one line, with an ellipsis if cut."""
    flat = " ".join(content.split())
    return flat[:limit] + "…" if len(flat) > limit else flat


# ─── Node Rendering ─────────────────────────────────────────────────────────


def _render_node(node: PositionedNode, radius: float) -> str:
    cx, cy = node.position.x, node.position.y
    fill = _NODE_FILL[node.role]
    bx, by = cx + radius * 0.7, cy - radius * 0.7
    label_y = cy + radius + FONT_SIZE + 6
    small = _font(FONT_SIZE - 2)

    parts = [
        f'<g class="node role-{node.role.value}" data-id="{_escape(node.id)}">',
        f'<circle cx="{format_coord(cx)}" cy="{format_coord(cy)}" r="{format_coord(radius)}" fill="{fill}" '
        'stroke="white" stroke-width="4"/>',
        f'<circle cx="{format_coord(bx)}" cy="{format_coord(by)}" r="{BADGE_RADIUS}" fill="white" stroke="#D1D5DB"/>',
        f'<text x="{format_coord(bx)}" y="{format_coord(by)}" dominant-baseline="central" text-anchor="middle" '
        f'{_font(11)} font-weight="bold" fill="#374151">{node.step}</text>',
        f'<text x="{format_coord(cx)}" y="{format_coord(label_y)}" text-anchor="middle" {_font()} font-weight="600" '
        f'fill="#1F2937">{_ROLE_NAME[node.role]}</text>',
        f'<text x="{format_coord(cx)}" y="{format_coord(label_y + FONT_SIZE + 2)}" text-anchor="middle" {small} '
        f'font-style="italic" fill="#6B7280">"{_escape(snippet(node.content))}"</text>',
        "</g>",
    ]
    return "\n".join(parts)


# ─── Edge Rendering ─────────────────────────────────────────────────────────


def _render_edge(edge: EdgeDescriptor) -> str:
    color = _EDGE_USER if edge.is_user_message else _EDGE_ASSISTANT
    kind = "branch" if edge.is_branch else "continuation"
    parts = [
        f'<path class="edge {kind}" d="{edge.path_data()}" stroke="{color}" fill="none" '
        f'stroke-width="3" {_EDGE_DASH} marker-end="url(#arrowhead)"/>',
    ]
    if edge.is_branch:
        mid = edge.midpoint
        parts.append(
            f'<circle class="branch-marker" cx="{format_coord(mid.x)}" cy="{format_coord(mid.y - 20)}" '
            f'r="{BRANCH_MARKER_RADIUS}" fill="{_BRANCH_FILL}" stroke="white" stroke-width="2"/>'
        )
    return "\n".join(parts)


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes Layout IR, produces SVG string."""

    def render(self, result: LayoutResult) -> str:
        if not result.nodes:
            return ""

        width, height = result.canvas_size()
        svg_w, svg_h = format_coord(width), format_coord(height)
        radius = result.config.node_radius

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{svg_w}" height="{svg_h}" viewBox="0 0 {svg_w} {svg_h}">',
            "<defs>",
            '  <marker id="arrowhead" markerWidth="10" markerHeight="10" refX="10" refY="3" orient="auto" '
            'markerUnits="strokeWidth">',
            f'    <path d="M0,0 L10,3 L0,6 L3,3 z" fill="{_EDGE_ASSISTANT}"/>',
            "  </marker>",
            "</defs>",
            f'<rect width="{svg_w}" height="{svg_h}" fill="white"/>',
        ]

        # Edges (behind nodes)
        for edge in result.edges:
            parts.append(_render_edge(edge))

        # Nodes (on top)
        for node in result.nodes:
            parts.append(_render_node(node, radius))

        parts.append("</svg>")
        return "\n".join(parts)
