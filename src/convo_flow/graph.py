"""Conversation graph — explicit adjacency over a parent-referencing message list.

The message feed only carries parent pointers. ``ConversationGraph`` builds the
parent → children structure once, as a networkx DiGraph plus an ordered
children index, so later stages never rescan the list to find "the first
child of X".
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import networkx as nx

from convo_flow.errors import (
    CyclicParentError,
    DanglingParentError,
    DuplicateMessageError,
    OrderingError,
)
from convo_flow.messages import Message

logger = logging.getLogger(__name__)


def build_children_index(messages: Sequence[Message]) -> dict[str, list[str]]:
    """Map parent id → child ids, children kept in feed order.

    Parent ids that name no message in the list still get an entry, so the
    index answers "first child" questions for orphans too.
    """
    children: dict[str, list[str]] = {}
    for message in messages:
        if message.parent_id:
            children.setdefault(message.parent_id, []).append(message.id)
    return children


@dataclass
class ConversationGraph:
    """A conversation as a directed parent → child graph.

    Attributes:
        digraph: networkx DiGraph; node attribute ``message`` holds the Message.
        messages: The messages in feed order.
        children: Parent id → ordered child ids (see ``build_children_index``).
        duplicates: Ids seen more than once while building.
    """

    digraph: nx.DiGraph
    messages: list[Message]
    children: dict[str, list[str]]
    duplicates: list[str] = field(default_factory=list)

    @classmethod
    def from_messages(cls, messages: Sequence[Message]) -> ConversationGraph:
        """Build the graph without validating it."""
        g: nx.DiGraph = nx.DiGraph()
        duplicates: list[str] = []
        for message in messages:
            if message.id in g:
                duplicates.append(message.id)
            g.add_node(message.id, message=message)
        for message in messages:
            if message.parent_id and message.parent_id in g:
                g.add_edge(message.parent_id, message.id)
        return cls(
            digraph=g,
            messages=list(messages),
            children=build_children_index(messages),
            duplicates=duplicates,
        )

    @property
    def roots(self) -> list[str]:
        """Ids of messages with no parent, in feed order."""
        return [m.id for m in self.messages if not m.parent_id]

    def validate(self, require_order: bool = True) -> None:
        """Reject input the layout engine cannot draw faithfully.

        Checks, in order: duplicate ids, dangling parent references, cycles in
        the parent chain, and (when ``require_order``) parents preceding their
        children in feed order. Raises the matching ``InputIntegrityError``
        subclass on the first failure.
        """
        if self.duplicates:
            dup = self.duplicates[0]
            raise DuplicateMessageError(f"duplicate message id {dup!r}", message_id=dup)

        for message in self.messages:
            if message.parent_id and message.parent_id not in self.digraph:
                raise DanglingParentError(
                    f"message {message.id!r} references unknown parent {message.parent_id!r}",
                    message_id=message.id,
                )

        try:
            cycle = nx.find_cycle(self.digraph)
        except nx.NetworkXNoCycle:
            cycle = []
        if cycle:
            path = " -> ".join(src for src, _ in cycle)
            raise CyclicParentError(f"cyclic parent chain: {path}", message_id=cycle[0][0])

        if require_order:
            index = {m.id: i for i, m in enumerate(self.messages)}
            for i, message in enumerate(self.messages):
                if message.parent_id and index[message.parent_id] > i:
                    raise OrderingError(
                        f"message {message.id!r} appears before its parent {message.parent_id!r}",
                        message_id=message.id,
                    )

        logger.debug(
            "validated conversation: %d messages, %d roots",
            len(self.messages),
            len(self.roots),
        )
