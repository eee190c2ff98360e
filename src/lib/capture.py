"""
Capture sessions

A capture redirects ambient output from the moment it is created until
stop() is called, then holds the captured text as a value:

    capture = t.capture()
    t.echo("  <b>Hello</b>  ")
    capture.stop("trim")
    str(capture)  # '<b>Hello</b>'
"""

from typing import Optional

from .errors import AlreadyStopped, NotStopped
from .log import LOG
from .output import Output, OutputBuffer
from .transforms import Pipeline, TransformRegistry


class Capture:
    """
    A single capture of ambient output

    Terminal once stopped: the value can be read any number of times,
    stopping again is an error.

    Attributes:
        stopped: Whether stop() has been called
        transformPipeline: Names applied by stop(), empty if none
    """

    def __init__(self, output: Output, transforms: TransformRegistry) -> None:
        self.transforms = transforms
        self.stopped = False
        self.transformPipeline: list[str] = []
        self._value: Optional[str] = None
        self._buffer: OutputBuffer = output.buffer_open(exclusive=True)

    def stop(self, transforms: Optional[Pipeline] = None) -> 'Capture':
        """
        Stop capturing and store the text

        Args:
            transforms: Optional "a|b" string or sequence of transform names
                        applied to the captured text in order

        Returns:
            This capture, so stop() can be chained with value()

        Raises:
            AlreadyStopped: If the capture was already stopped
            UnknownTransform: If a transform name does not resolve
        """
        if self.stopped:
            raise AlreadyStopped("This capture has already been stopped")

        text = self._buffer.stop()
        self.stopped = True
        self._value = text

        if transforms:
            self.transformPipeline = self.transforms.names_resolve(transforms)
            self._value = self.transforms.pipeline_apply(text, self.transformPipeline)

        LOG(f"Capture stopped ({len(self._value)} chars)", level=3)
        return self

    def end(self, transforms: Optional[Pipeline] = None) -> 'Capture':
        """Alias for stop()"""
        return self.stop(transforms)

    def value(self) -> str:
        """
        Captured (and possibly transformed) text

        Raises:
            NotStopped: If the capture is still running
        """
        if not self.stopped:
            raise NotStopped("Capture must be stopped before its value is read")
        return self._value or ''

    def __str__(self) -> str:
        return self.value()
