"""Public API: transcript in, layout or SVG out."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from convo_flow.errors import TranscriptFormatError
from convo_flow.graph import ConversationGraph
from convo_flow.layout import LayoutConfig, LayoutResult, layout_conversation
from convo_flow.messages import Message
from convo_flow.renderers import SvgRenderer
from convo_flow.transcript import load_transcript


def layout_messages(
    messages: Sequence[Message],
    cfg: LayoutConfig | None = None,
    validate: bool = True,
) -> LayoutResult:
    """Validate (unless told not to) and lay out an already-parsed message list."""
    if validate and messages:
        ConversationGraph.from_messages(messages).validate()
    return layout_conversation(messages, cfg)


def parse_transcript(source: str | dict[str, Any]) -> list[Message]:
    """Parse a transcript given as JSON text or as an already-decoded object."""
    if isinstance(source, str):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as exc:
            raise TranscriptFormatError(f"transcript is not valid JSON: {exc}") from exc
    return load_transcript(source)


def layout_transcript(
    source: str | dict[str, Any],
    cfg: LayoutConfig | None = None,
    validate: bool = True,
) -> LayoutResult:
    return layout_messages(parse_transcript(source), cfg, validate)


def render_svg(
    source: str | dict[str, Any],
    cfg: LayoutConfig | None = None,
    validate: bool = True,
) -> str:
    """Render a transcript straight to an SVG document."""
    return SvgRenderer().render(layout_transcript(source, cfg, validate))
