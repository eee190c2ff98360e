"""
platecraft - Capture, embed and conditional markup helpers for native Python templates

Template bodies are plain Python callables writing to an ambient output;
platecraft adds deferred embeds with captured blocks, output captures,
conditional tag matching and asset linking on top.
"""

__version__ = "1.0.0"

from .lib import Engine, Template, RenderContext, Capture, EmbedSession, TagMatcher, LOG

__all__ = ["Engine", "Template", "RenderContext", "Capture", "EmbedSession", "TagMatcher", "LOG", "__version__"]
