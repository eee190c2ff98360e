"""
Render-pass state models

Defines the embed state machine (states, operations and the legal-transition
table) and the frames pushed by the block and conditional tag helpers.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Tuple, Type, Union, TYPE_CHECKING

from ..lib.errors import (
    BlockInProgress,
    NestedBlock,
    NestedEmbed,
    NoActiveBlock,
    NoActiveEmbed,
    SequencingError,
)

if TYPE_CHECKING:
    from ..lib.output import OutputBuffer


class EmbedState(Enum):
    """
    States of an embed session

    Closed -> Open -> (BlockOpen <-> Open)* -> Closed
    """
    CLOSED = "closed"
    OPEN = "open"
    BLOCK_OPEN = "block_open"


class EmbedOperation(Enum):
    """Operations that move an embed session between states"""
    BEGIN = "begin"
    BIND = "bind"
    BLOCK_START = "block_start"
    BLOCK_STOP = "block_stop"
    END = "end"


Transition = Union[EmbedState, Type[SequencingError]]


# (state, operation) -> next state, or the error raised for an illegal call
EMBED_TRANSITIONS: Dict[Tuple[EmbedState, EmbedOperation], Transition] = {
    (EmbedState.CLOSED, EmbedOperation.BEGIN): EmbedState.OPEN,
    (EmbedState.CLOSED, EmbedOperation.BIND): NoActiveEmbed,
    (EmbedState.CLOSED, EmbedOperation.BLOCK_START): NoActiveEmbed,
    (EmbedState.CLOSED, EmbedOperation.BLOCK_STOP): NoActiveEmbed,
    (EmbedState.CLOSED, EmbedOperation.END): NoActiveEmbed,

    (EmbedState.OPEN, EmbedOperation.BEGIN): NestedEmbed,
    (EmbedState.OPEN, EmbedOperation.BIND): EmbedState.OPEN,
    (EmbedState.OPEN, EmbedOperation.BLOCK_START): EmbedState.BLOCK_OPEN,
    (EmbedState.OPEN, EmbedOperation.BLOCK_STOP): NoActiveBlock,
    (EmbedState.OPEN, EmbedOperation.END): EmbedState.CLOSED,

    (EmbedState.BLOCK_OPEN, EmbedOperation.BEGIN): NestedEmbed,
    (EmbedState.BLOCK_OPEN, EmbedOperation.BIND): BlockInProgress,
    (EmbedState.BLOCK_OPEN, EmbedOperation.BLOCK_START): NestedBlock,
    (EmbedState.BLOCK_OPEN, EmbedOperation.BLOCK_STOP): EmbedState.OPEN,
    (EmbedState.BLOCK_OPEN, EmbedOperation.END): BlockInProgress,
}


@dataclass
class BlockFrame:
    """
    A block capture in progress inside an embed

    Attributes:
        bindingKey: Template variable the captured markup is bound to
        buffer: Output buffer receiving ambient writes until the block stops
    """
    bindingKey: str
    buffer: 'OutputBuffer'


@dataclass(frozen=True)
class TagFrame:
    """
    An opened conditional tag waiting for its closing call

    Attributes:
        tagName: Tag name as given to the opening helper (trimmed)
        shouldRender: Whether the opening markup was emitted, and so
                      whether the closing markup must be
    """
    tagName: str
    shouldRender: bool

    def matches(self, tagName: str) -> bool:
        """Case-insensitive comparison against a closing tag name"""
        return self.tagName.lower() == tagName.strip().lower()
