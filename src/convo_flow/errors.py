"""Exception hierarchy for ingestion, validation and layout failures."""

from __future__ import annotations


class ConvoFlowError(Exception):
    """Base class for every error raised by convo_flow."""


class TranscriptFormatError(ConvoFlowError):
    """The transcript payload is not a recognised conversation format."""


class InputIntegrityError(ConvoFlowError):
    """The message list cannot be laid out as a tree.

    Attributes:
        message_id: Id of the offending message, when one can be named.
    """

    def __init__(self, message: str, message_id: str | None = None) -> None:
        super().__init__(message)
        self.message_id = message_id


class DuplicateMessageError(InputIntegrityError):
    """Two messages share the same id."""


class DanglingParentError(InputIntegrityError):
    """A message references a parent id that is not in the list."""


class CyclicParentError(InputIntegrityError):
    """Following parent links from a message returns to that message."""


class OrderingError(InputIntegrityError):
    """A child appears before its parent in feed order."""


class DepthLimitError(InputIntegrityError):
    """A parent chain is longer than the configured depth guard."""
