"""Transcript ingestion — ChatGPT JSON payloads to a feed-ordered Message list.

Two shapes are understood:

- shared conversation: ``{"linear_conversation": [{id, parent, message}, ...]}``
- data export conversation: ``{"mapping": {node_id: {parent, children, message}}}``

System turns and turns without text are dropped; their children are
re-attached to the nearest kept ancestor so the tree stays connected.
"""

from __future__ import annotations

import logging
import uuid
from collections import deque
from typing import Any

from convo_flow.errors import TranscriptFormatError
from convo_flow.messages import Message, Role

logger = logging.getLogger(__name__)

PART_SEPARATOR = "\n\n"
NON_TEXT_PART = "..."
MIN_MESSAGES = 2


def generate_id() -> str:
    return f"node_{uuid.uuid4().hex[:12]}"


def _ref(value: Any) -> str | None:
    """Node ids may arrive as numbers; compare them as strings."""
    if value is None or value == "":
        return None
    return str(value)


def join_parts(content: dict[str, Any] | str | None) -> str:
    """Flatten a message ``content`` object into display text.

    String parts are joined with a blank line; anything else in ``parts``
    (images, attachments) becomes a placeholder. Content without parts
    becomes ``[content_type]``. A bare string is taken as the text itself.
    """
    if isinstance(content, str):
        return content
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if parts is None:
        content_type = content.get("content_type")
        return f"[{content_type}]" if content_type else ""
    if not isinstance(parts, list):
        raise TranscriptFormatError(f"content parts must be a list, got {type(parts).__name__}")
    return PART_SEPARATOR.join(p if isinstance(p, str) else NON_TEXT_PART for p in parts)


def _author_role(message: dict[str, Any]) -> str:
    author = message.get("author")
    if not isinstance(author, dict):
        return ""
    return str(author.get("role") or "").strip().lower()


class _Reparenter:
    """Tracks dropped turns so their children can skip over them."""

    def __init__(self) -> None:
        self._dropped: dict[str, str | None] = {}

    def drop(self, node_id: str, parent_id: str | None) -> None:
        self._dropped[node_id] = self.resolve(parent_id)

    def resolve(self, parent_id: str | None) -> str | None:
        seen: set[str] = set()
        while parent_id in self._dropped and parent_id not in seen:
            seen.add(parent_id)
            parent_id = self._dropped[parent_id]
        return parent_id


def _to_message(
    node_id: str,
    parent_id: str | None,
    raw: Any,
    reparent: _Reparenter,
) -> Message | None:
    """Build a Message for one transcript node, or record it as dropped."""
    if not raw or not isinstance(raw, dict):
        reparent.drop(node_id, parent_id)
        return None
    role = _author_role(raw)
    content = join_parts(raw.get("content"))
    if role == "system" or not content.strip():
        logger.debug("dropping %s turn %r", role or "empty", node_id)
        reparent.drop(node_id, parent_id)
        return None
    return Message(
        id=node_id,
        role=Role.parse(role),
        content=content,
        parent_id=reparent.resolve(parent_id),
    )


def _require_conversation(messages: list[Message], kind: str) -> list[Message]:
    if len(messages) < MIN_MESSAGES:
        raise TranscriptFormatError(f"{kind} transcript holds {len(messages)} usable message(s)")
    logger.info("parsed %d messages from %s transcript", len(messages), kind)
    return messages


# ─── Shared Conversation ──────────────────────────────────────────────────────


def parse_share_json(data: dict[str, Any]) -> list[Message]:
    """Parse a shared-conversation payload (``linear_conversation``)."""
    items = data.get("linear_conversation")
    if not isinstance(items, list):
        raise TranscriptFormatError("shared transcript has no linear_conversation list")

    reparent = _Reparenter()
    messages: list[Message] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        node_id = _ref(item.get("id")) or generate_id()
        message = _to_message(node_id, _ref(item.get("parent")), item.get("message"), reparent)
        if message is not None:
            messages.append(message)

    return _require_conversation(messages, "shared")


# ─── Data Export Conversation ─────────────────────────────────────────────────


def _find_root(mapping: dict[str, Any]) -> str:
    """Root of an export mapping: a literal "root" key, else the parentless node."""
    if "root" in mapping:
        return "root"
    for node_id, node in mapping.items():
        if isinstance(node, dict) and node.get("parent") is None:
            return node_id
    raise TranscriptFormatError("export mapping has no root node")


def _node(mapping: dict[str, Any], node_id: str) -> dict[str, Any]:
    node = mapping.get(node_id)
    return node if isinstance(node, dict) else {}


def _sibling_key(mapping: dict[str, Any], child_id: str) -> tuple[int, float, str]:
    # Missing timestamps sort after real ones; id breaks ties.
    message = _node(mapping, child_id).get("message")
    create_time = message.get("create_time") if isinstance(message, dict) else None
    if create_time is None:
        return (1, 0.0, child_id)
    try:
        return (0, float(create_time), child_id)
    except (TypeError, ValueError):
        return (1, 0.0, child_id)


def parse_export_conversation(data: dict[str, Any]) -> list[Message]:
    """Parse one conversation from a data export (``mapping`` tree).

    Nodes are visited breadth-first from the root, siblings ordered by
    create_time, so every parent precedes its children in the result.
    """
    mapping = data.get("mapping")
    if not isinstance(mapping, dict) or not mapping:
        raise TranscriptFormatError("export transcript has no mapping")

    reparent = _Reparenter()
    messages: list[Message] = []
    queue: deque[str] = deque([_find_root(mapping)])
    visited: set[str] = set()
    while queue:
        node_id = queue.popleft()
        if node_id in visited or node_id not in mapping:
            continue
        visited.add(node_id)
        node = _node(mapping, node_id)

        message = _to_message(node_id, _ref(node.get("parent")), node.get("message"), reparent)
        if message is not None:
            messages.append(message)

        children = node.get("children")
        if not isinstance(children, list):
            children = []
        kids = [str(k) for k in children if isinstance(k, (str, int)) and str(k) in mapping]
        queue.extend(sorted(kids, key=lambda k: _sibling_key(mapping, k)))

    return _require_conversation(messages, "export")


def load_transcript(data: Any) -> list[Message]:
    """Detect the transcript shape and parse it."""
    if not isinstance(data, dict):
        raise TranscriptFormatError(f"expected a JSON object, got {type(data).__name__}")
    if "linear_conversation" in data:
        return parse_share_json(data)
    if "mapping" in data:
        return parse_export_conversation(data)
    raise TranscriptFormatError("unrecognised transcript: expected linear_conversation or mapping")
