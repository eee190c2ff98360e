"""
Render contexts

A RenderContext holds all mutable state of one render pass: the ambient
output, the embed session and the conditional tag matchers. The
outermost render creates one and activates it; nested renders (inserts,
fetches, embeds) reuse it. Concurrent passes in other threads or tasks
each see their own context through a ContextVar.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from ..config import appsettings, AppSettings
from ..models.protocols import TemplateHost
from .capture import Capture
from .embed import EmbedSession
from .errors import NoActiveRender
from .log import context_connectToLogger, context_disconnectFromLogger
from .output import Output
from .tags import TagMatcher
from .transforms import TransformRegistry

_active_context: ContextVar[Optional['RenderContext']] = ContextVar('render_context', default=None)


class RenderContext:
    """
    State of one render pass

    Attributes:
        output: Ambient output of the pass
        embeds: Embed session (one open embed at a time)
        tags: Conditional tag stack for tagIf()/ifTag()
        orTags: Single-slot matcher for tagOr()/orTag()
        verbosity: Logging verbosity while this pass is active
    """

    def __init__(
        self,
        host: TemplateHost,
        transforms: TransformRegistry,
        settings: Optional[AppSettings] = None,
        verbosity: Optional[int] = None,
    ) -> None:
        self.settings = settings or appsettings
        self.host = host
        self.transforms = transforms
        self.verbosity = self.settings.verbosity if verbosity is None else verbosity
        self.output = Output()
        self.embeds = EmbedSession(self.output, host.insert, self.settings)
        self.tags = TagMatcher()
        self.orTags = TagMatcher(capacity=1)

    def capture(self) -> Capture:
        """Start a capture of this pass's ambient output"""
        return Capture(self.output, self.transforms)


def context_active() -> Optional[RenderContext]:
    """The render context of the current pass, None outside of a render"""
    return _active_context.get()


def context_current() -> RenderContext:
    """
    The render context of the current pass

    Raises:
        NoActiveRender: Outside of a render pass
    """
    context = _active_context.get()
    if context is None:
        raise NoActiveRender("Ambient output is only available while a template is rendering")
    return context


@contextmanager
def context_activate(context: RenderContext) -> Iterator[RenderContext]:
    """Make a context current (and connect it to LOG) for the duration of a with block"""
    token = _active_context.set(context)
    log_token = context_connectToLogger(context)
    try:
        yield context
    finally:
        context_disconnectFromLogger(log_token)
        _active_context.reset(token)
