"""
Models package for platecraft

Contains data structures and type definitions for render passes, assets and
template functions.
"""

from .state import EmbedState, EmbedOperation, EMBED_TRANSITIONS, BlockFrame, TagFrame
from .assets import FileKind, FolderDefinition, AssetReference
from .functions import FunctionSpec, FunctionCategory
from .protocols import TemplateHost, FileSystem

__all__ = [
    "EmbedState",
    "EmbedOperation",
    "EMBED_TRANSITIONS",
    "BlockFrame",
    "TagFrame",
    "FileKind",
    "FolderDefinition",
    "AssetReference",
    "FunctionSpec",
    "FunctionCategory",
    "TemplateHost",
    "FileSystem",
]
