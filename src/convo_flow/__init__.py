"""convo_flow — lay out and draw branching chat conversations."""

from convo_flow.api import layout_messages, layout_transcript, parse_transcript, render_svg
from convo_flow.errors import (
    ConvoFlowError,
    CyclicParentError,
    DanglingParentError,
    DepthLimitError,
    DuplicateMessageError,
    InputIntegrityError,
    OrderingError,
    TranscriptFormatError,
)
from convo_flow.layout import LayoutConfig, LayoutResult, layout_conversation
from convo_flow.messages import Message, Role

__version__ = "0.1.0"

__all__ = [
    "ConvoFlowError",
    "CyclicParentError",
    "DanglingParentError",
    "DepthLimitError",
    "DuplicateMessageError",
    "InputIntegrityError",
    "LayoutConfig",
    "LayoutResult",
    "Message",
    "OrderingError",
    "Role",
    "TranscriptFormatError",
    "layout_conversation",
    "layout_messages",
    "layout_transcript",
    "parse_transcript",
    "render_svg",
]
