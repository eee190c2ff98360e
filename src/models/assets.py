"""
Asset loader data models

Folder definitions parsed from configuration and the references resolved
from folder::file tokens.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Iterable


class FileKind(Enum):
    """
    Kind of asset, derived from the file extension

    Decides which markup (link/script/style/preload) an asset gets.
    """
    CSS = "css"
    JS = "js"
    FONT = "font"
    UNKNOWN = "unknown"

    @classmethod
    def fromExtension(cls, extension: str, fontExtensions: Iterable[str]) -> "FileKind":
        """
        Classify a file extension

        Args:
            extension: Extension without the leading dot, any case
            fontExtensions: Extensions treated as fonts

        Returns:
            Matching FileKind, UNKNOWN if nothing matches
        """
        ext = extension.lower()
        if ext == 'css':
            return cls.CSS
        if ext == 'js':
            return cls.JS
        if ext in {e.lower() for e in fontExtensions}:
            return cls.FONT
        return cls.UNKNOWN


@dataclass(frozen=True)
class FolderDefinition:
    """
    A named asset folder

    Attributes:
        name: Folder name used as the token prefix (e.g., "css")
        rootPath: Normalized web path, always one leading slash and no
                  trailing slash (e.g., "/assets/styles")

    Example:
        Config line "css::assets/styles/" becomes
        FolderDefinition(name="css", rootPath="/assets/styles")
    """
    name: str
    rootPath: str

    @staticmethod
    def rootPath_normalize(path: str) -> str:
        """Strip leading and trailing slashes, then re-add a single leading slash"""
        return "/" + path.strip().strip("/")


@dataclass(frozen=True)
class AssetReference:
    """
    Result of resolving a folder::file token

    Attributes:
        folder: Folder name from the token
        file: File part of the token, may contain subdirectories
        path: Resolved web path (folder root + file)
        kind: Asset kind derived from the extension
        configured: Whether the folder exists in the definitions; False only
                    for best-effort resolutions in non-strict mode
    """
    folder: str
    file: str
    path: str
    kind: FileKind
    configured: bool = True
