"""
Centralized logging using Loguru with render-context-aware verbosity.

This module provides a LOG() function that respects the active RenderContext's
verbosity level without passing the context through every helper.

Features:
- Verbosity tied to the render pass that is currently executing
- Rich formatting with timestamps, colors, and metadata
- Safe across threads and tasks using contextvars

Usage:
    from platecraft.lib.log import LOG, context_connectToLogger

    # At the start of a render pass:
    token = context_connectToLogger(context)

    # Anywhere in that pass:
    LOG("Rendering components::card", level=2)
    LOG("Embed state Open -> BlockOpen", level=3)

    # When the pass finishes:
    context_disconnectFromLogger(token)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar, Token
import sys

# Context variable to hold the render context being logged for
_render_context: ContextVar[Optional[Any]] = ContextVar('log_render_context', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def context_connectToLogger(context: Any) -> Token:
    """
    Connect a render context to the logging context.

    Args:
        context: Object with a ``verbosity`` attribute (normally a RenderContext)

    Returns:
        Token to restore the previous connection with context_disconnectFromLogger()
    """
    return _render_context.set(context)


def context_disconnectFromLogger(token: Token) -> None:
    """Restore whatever context was connected before the matching connect call"""
    _render_context.reset(token)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the connected context's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Soft failures (missing assets, unconfigured folders)
        2 = Renders and embeds
        3 = State machine transitions and buffer traffic
    """
    context = _render_context.get()

    if context and getattr(context, 'verbosity', 0) >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """Log a soft failure; shown whenever a context with verbosity >= 1 is connected"""
    context = _render_context.get()

    if context and getattr(context, 'verbosity', 0) >= 1:
        logger.opt(depth=1).warning(message, **kwargs)
