"""Message records — the input unit of the layout engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def parse(cls, value: str | Role | None) -> Role:
        """Map a free-form author role onto USER / ASSISTANT.

        Anything that is not "user" (case-insensitive) is drawn as the assistant
        side of the exchange, tools included.
        """
        if isinstance(value, Role):
            return value
        return cls.USER if (value or "").strip().lower() == "user" else cls.ASSISTANT


@dataclass(frozen=True)
class Message:
    """One turn in a conversation.

    Attributes:
        id: Unique message id.
        role: Who spoke.
        content: Plain text of the turn.
        parent_id: Id of the preceding turn, or None for a root.
    """

    id: str
    role: Role
    content: str
    parent_id: str | None = None

    @property
    def is_root(self) -> bool:
        return not self.parent_id

    @property
    def is_user(self) -> bool:
        return self.role is Role.USER
