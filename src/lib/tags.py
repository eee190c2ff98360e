"""
Conditional tag matching

Lets a template decide once, at the opening tag, whether a wrapper is
rendered, and have the closing call written later in the body follow
that decision:

    t.tagIf("a", page["url"], {"href": page["url"]})
      <span>label</span>
    t.ifTag("a")

Frames are kept on a stack so independent conditional tags can nest.
A matcher created with capacity=1 serves the single-slot "pick tag A or
tag B" helpers; opening a second tag on it is an error instead of
silently replacing the first.
"""

import html
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..models.state import TagFrame
from .errors import TagCapacityExceeded, TagMismatch, UnbalancedClose
from .log import LOG

Attributes = Union[Mapping[Union[str, int], Any], Sequence[Any]]


def attributeValue_format(value: Any) -> str:
    """Booleans become the literal strings true/false, everything else str()"""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def attributes_build(attributes: Optional[Attributes]) -> str:
    """
    Serialize attributes for an opening tag

    String keys become key="value" pairs, integer keys (or plain sequence
    items) become bare tokens, None values are dropped. Order follows the
    input.

    Args:
        attributes: Mapping or sequence of bare tokens

    Returns:
        Space separated attribute string without a leading space

    Example:
        >>> attributes_build({"class": "nav", 0: "hidden", "id": None, "data-open": False})
        'class="nav" hidden data-open="false"'
    """
    if not attributes:
        return ''

    if isinstance(attributes, Mapping):
        items = list(attributes.items())
    else:
        items = list(enumerate(attributes))

    parts: List[str] = []
    for key, value in items:
        if value is None:
            continue
        text = html.escape(attributeValue_format(value), quote=True)
        if isinstance(key, int):
            parts.append(text)
        else:
            parts.append(f'{key}="{text}"')
    return ' '.join(parts)


def openingTag_build(tagName: str, attributes: Optional[Attributes] = None) -> str:
    """Opening markup for a tag, with serialized attributes if any"""
    attribute_string = attributes_build(attributes)
    if attribute_string:
        return f'<{tagName} {attribute_string}>'
    return f'<{tagName}>'


class TagMatcher:
    """
    LIFO stack of opened conditional tags

    Attributes:
        capacity: Maximum number of open frames, None for unbounded
        frames: Open frames, innermost last
    """

    def __init__(self, capacity: Optional[int] = None) -> None:
        self.capacity = capacity
        self.frames: List[TagFrame] = []

    @property
    def depth(self) -> int:
        return len(self.frames)

    def frame_push(self, tagName: str, shouldRender: bool) -> TagFrame:
        """
        Record an opened tag

        Raises:
            TagCapacityExceeded: If the matcher is full
        """
        if self.capacity is not None and len(self.frames) >= self.capacity:
            raise TagCapacityExceeded(
                f"Conditional tag '{tagName}' opened while "
                f"'{self.frames[-1].tagName}' is still waiting to be closed"
            )
        frame = TagFrame(tagName=tagName.strip(), shouldRender=bool(shouldRender))
        self.frames.append(frame)
        LOG(f"Conditional tag '{frame.tagName}' pushed (render={frame.shouldRender})", level=3)
        return frame

    def frame_pop(self, tagName: Optional[str] = None) -> TagFrame:
        """
        Remove the innermost frame

        Args:
            tagName: If given, the popped frame must carry this name
                     (compared case-insensitively)

        Raises:
            UnbalancedClose: If no tag is open
            TagMismatch: If tagName differs from the popped frame's name
        """
        if not self.frames:
            raise UnbalancedClose(
                "A conditional tag must be opened before it can be closed"
                + (f" (closing '{tagName}')" if tagName else "")
            )

        frame = self.frames.pop()

        if tagName is not None and not frame.matches(tagName):
            raise TagMismatch(
                f"Invalid closing conditional tag. Expected {frame.tagName} but received {tagName.strip()}"
            )
        return frame

    def tag_open(
        self,
        tagName: str,
        shouldRender: Any,
        attributes: Optional[Attributes] = None,
    ) -> str:
        """
        Open a tag if shouldRender is truthy

        The frame is pushed either way so the matching tag_close() knows
        whether to emit markup.

        Returns:
            Opening markup, or "" when not rendering
        """
        frame = self.frame_push(tagName, bool(shouldRender))
        if not frame.shouldRender:
            return ''

        return openingTag_build(frame.tagName, attributes)

    def tag_close(self, tagName: str) -> str:
        """
        Close the innermost conditional tag

        Returns:
            Closing markup, or "" when the opening call did not render

        Raises:
            UnbalancedClose: If no tag is open
            TagMismatch: If tagName does not match the innermost open tag
        """
        frame = self.frame_pop(tagName)
        if not frame.shouldRender:
            return ''
        return f'</{frame.tagName}>'
