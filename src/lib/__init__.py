"""
platecraft - Capture, embed and conditional markup helpers for native Python templates
"""

from .engine import Engine, Template
from .context import RenderContext
from .capture import Capture
from .embed import EmbedSession
from .tags import TagMatcher
from .log import LOG, context_connectToLogger

__all__ = [
    "Engine",
    "Template",
    "RenderContext",
    "Capture",
    "EmbedSession",
    "TagMatcher",
    "LOG",
    "context_connectToLogger",
]
