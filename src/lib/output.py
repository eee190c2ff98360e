"""
Ambient output and output buffers

Template bodies write to the "current response" without naming a
destination. Output is that destination for one render pass: writes land
in the innermost active OutputBuffer, or in the root text when nothing is
capturing.

Buffers are redirections owned by exactly one caller (a capture, a block,
a render). Each buffer can only be active once at a time, and buffers
must be released innermost-first. Captures and blocks share a single
capture slot per pass: while one holds it, starting another fails with
AlreadyActive. Render buffers do not take the slot.

Example:
    >>> output = Output()
    >>> output.write("<p>")
    >>> with output.buffer() as buffer:
    ...     output.write("captured")
    >>> buffer.text
    'captured'
    >>> output.getvalue()
    '<p>'
"""

from typing import Any, List, Optional

from .errors import AlreadyActive, BufferOrderError, NotActive
from .log import LOG


class OutputBuffer:
    """
    A single redirection of ambient output

    Usable either with explicit start()/stop() calls spread across a
    template body, or as a context manager that always releases the
    redirection, including when the body raises.

    Attributes:
        output: Ambient output this buffer redirects
        exclusive: Whether this buffer holds the capture slot while active
        active: True between start() and stop()
        text: Text captured by the last stop(), None before that
    """

    def __init__(self, output: 'Output', exclusive: bool = False) -> None:
        self.output = output
        self.exclusive = exclusive
        self.active = False
        self.text: Optional[str] = None
        self._parts: List[str] = []

    def start(self) -> 'OutputBuffer':
        """
        Begin redirecting ambient output into this buffer

        Raises:
            AlreadyActive: If this buffer is already capturing, or if it holds
                           the capture slot and another capture or block has it
        """
        if self.active:
            raise AlreadyActive("This output buffer is already capturing")
        if self.exclusive and self.output.slotHolder is not None:
            raise AlreadyActive(
                "Captures and blocks cannot be nested; stop the active one before starting another"
            )

        self._parts = []
        self.text = None
        self.output._push(self)
        self.active = True
        return self

    def stop(self) -> str:
        """
        Release the redirection and return what was captured

        Raises:
            NotActive: If this buffer is not capturing
            BufferOrderError: If a buffer opened after this one is still active
        """
        if not self.active:
            raise NotActive("This output buffer must be started before it can be stopped")

        self.output._pop(self)
        self.active = False
        self.text = ''.join(self._parts)
        self._parts = []
        return self.text

    def write(self, text: str) -> None:
        self._parts.append(text)

    def __enter__(self) -> 'OutputBuffer':
        if not self.active:
            self.start()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if not self.active:
            return
        if exc_type is None:
            self.stop()
            return
        # Release this buffer and everything opened inside it
        self.output.unwind(self.output.buffer_index(self))


class Output:
    """
    Ambient output stream of one render pass

    Attributes:
        depth: Number of buffers currently active
    """

    def __init__(self) -> None:
        self._stack: List[OutputBuffer] = []
        self._root: List[str] = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def capturing(self) -> bool:
        return bool(self._stack)

    @property
    def slotHolder(self) -> Optional[OutputBuffer]:
        """Active buffer holding the capture slot, None if the slot is free"""
        for buffer in reversed(self._stack):
            if buffer.exclusive:
                return buffer
        return None

    def write(self, text: Any) -> None:
        """Write text to the innermost active buffer, or to the root if none"""
        if text is None:
            return
        text = str(text)
        if self._stack:
            self._stack[-1].write(text)
        else:
            self._root.append(text)

    def buffer(self, exclusive: bool = False) -> OutputBuffer:
        """Create an inactive buffer bound to this output"""
        return OutputBuffer(self, exclusive)

    def buffer_open(self, exclusive: bool = False) -> OutputBuffer:
        """
        Create a buffer and start it immediately

        Raises:
            AlreadyActive: If exclusive and the capture slot is taken
        """
        return self.buffer(exclusive).start()

    def buffer_index(self, buffer: OutputBuffer) -> int:
        """Stack position of an active buffer"""
        return self._stack.index(buffer)

    def unwind(self, depth: int = 0) -> List[str]:
        """
        Release every buffer above a given depth, innermost first

        Used on error paths so no redirection outlives the code that
        opened it. Captured text is discarded.

        Args:
            depth: Number of buffers to leave active

        Returns:
            Text that was pending in each released buffer, innermost first
        """
        discarded = []
        while len(self._stack) > depth:
            discarded.append(self._stack[-1].stop())
        if discarded:
            LOG(f"Released {len(discarded)} output buffer(s) during unwind", level=3)
        return discarded

    def getvalue(self) -> str:
        """Text written while no buffer was active"""
        return ''.join(self._root)

    def _push(self, buffer: OutputBuffer) -> None:
        self._stack.append(buffer)
        LOG(f"Output buffer opened (depth {len(self._stack)})", level=3)

    def _pop(self, buffer: OutputBuffer) -> None:
        if not self._stack or self._stack[-1] is not buffer:
            raise BufferOrderError(
                "Output buffers must be stopped in reverse order of starting; "
                f"{len(self._stack) - self.buffer_index(buffer) - 1} inner buffer(s) still active"
            )
        self._stack.pop()
        LOG(f"Output buffer closed (depth {len(self._stack)})", level=3)
