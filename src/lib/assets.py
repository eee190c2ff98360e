"""
Asset references and asset markup

Assets are referenced from templates with folder::file tokens, where the
folder is one of the definitions configured as 'name::path' lines:

    css::/assets/styles
    js::/assets/scripts
    fonts::/assets/fonts

    t.linkAsset("css::app.css")
    # <link href="/assets/styles/app.css?v=1718000000" rel="stylesheet" />

Linked files get a cache-busting query derived from their modification
time. A missing file never breaks the page: the path is returned without
the query and a warning is logged, unless debug mode asks for an error.
"""

import posixpath
from typing import Any, Dict, Iterable, Optional

from ..config import appsettings, AppSettings
from ..models.assets import AssetReference, FileKind, FolderDefinition
from ..models.protocols import FileSystem
from .errors import (
    MalformedFolderDefinition,
    MalformedToken,
    MissingAsset,
    UnknownFolder,
    UnsupportedAssetType,
)
from .filesystem import LocalFileSystem
from .log import LOG, WARN
from .tags import Attributes, attributes_build


class AssetResolver:
    """
    Maps folder::file tokens to web paths and physical files

    Attributes:
        folders: Folder definitions by name, fixed after construction
        root: Filesystem directory web paths are relative to
        strict: Unknown folders raise UnknownFolder instead of resolving best-effort
        debug: Missing files raise MissingAsset instead of degrading
    """

    def __init__(
        self,
        definitions: str = "",
        root: str = ".",
        filesystem: Optional[FileSystem] = None,
        strict: bool = False,
        debug: bool = False,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self.settings = settings or appsettings
        self.root = root
        self.filesystem: FileSystem = filesystem or LocalFileSystem()
        self.strict = strict
        self.debug = debug
        self.folders: Dict[str, FolderDefinition] = self.definitions_parse(definitions)

    @classmethod
    def fromSettings(
        cls, settings: AppSettings, filesystem: Optional[FileSystem] = None
    ) -> "AssetResolver":
        """Build a resolver from the asset_* and mode settings"""
        return cls(
            definitions=settings.asset_definitions,
            root=settings.asset_root,
            filesystem=filesystem,
            strict=settings.strict_mode,
            debug=settings.debug_mode,
            settings=settings,
        )

    def definitions_parse(self, definitions: str) -> Dict[str, FolderDefinition]:
        """
        Parse 'name::path' lines into folder definitions

        Blank lines are ignored; a later line for the same name wins.

        Raises:
            MalformedFolderDefinition: If a line lacks the delimiter or a part is empty
        """
        delimiter = self.settings.folder_delimiter
        folders: Dict[str, FolderDefinition] = {}

        for line_number, line in enumerate(definitions.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue

            parts = line.split(delimiter)
            if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
                raise MalformedFolderDefinition(
                    f"Asset folder definition on line {line_number} must be "
                    f"'name{delimiter}path', got '{line}'"
                )

            name = parts[0].strip()
            folders[name] = FolderDefinition(
                name=name, rootPath=FolderDefinition.rootPath_normalize(parts[1])
            )

        LOG(f"Parsed {len(folders)} asset folder definition(s)", level=3)
        return folders

    def resolve(self, folderFile: str) -> AssetReference:
        """
        Resolve a folder::file token

        Raises:
            MalformedToken: If the token does not split into exactly two parts
            UnknownFolder: In strict mode, if the folder is not configured
        """
        parts = folderFile.split(self.settings.folder_delimiter)
        if len(parts) != 2:
            raise MalformedToken(f"'{folderFile}' cannot be parsed as a configured folder asset")

        folder, file = parts
        file = file.lstrip('/')
        definition = self.folders.get(folder)

        if definition is None:
            if self.strict:
                raise UnknownFolder(
                    f"The asset folder '{folder}' is missing or misconfigured. "
                    f"Configured folders: {', '.join(sorted(self.folders)) or 'none'}"
                )
            WARN(f"Asset folder '{folder}' is not configured, resolving '{file}' from the root")
            path = f"/{file}"
        else:
            path = f"{definition.rootPath.rstrip('/')}/{file}"

        extension = posixpath.splitext(file)[1].lstrip('.')
        return AssetReference(
            folder=folder,
            file=file,
            path=path,
            kind=FileKind.fromExtension(extension, self.settings.font_extensions),
            configured=definition is not None,
        )

    def path_get(self, folderFile: str, absolute: bool = False) -> str:
        """Web path of a token, optionally prefixed with the configured HTTP root"""
        path = self.resolve(folderFile).path
        if not absolute:
            return path
        return self.settings.http_root.rstrip('/') + path

    def absolutePath_get(self, path: str) -> str:
        """Physical location of a web path under the asset root"""
        return posixpath.join(self.root, path.lstrip('/'))

    def file_exists(self, path: str) -> bool:
        """
        Check a web path exists on disk

        Raises:
            MissingAsset: In debug mode, if it does not
        """
        exists = self.filesystem.exists(self.absolutePath_get(path))
        if not exists and self.debug:
            raise MissingAsset(f"The file '{path}' does not exist")
        return exists

    def contents_get(self, path: str) -> Optional[str]:
        """Text of the file behind a web path, None if it is missing"""
        if not self.file_exists(path):
            WARN(f"Cannot inline missing asset '{path}'")
            return None
        return self.filesystem.readAllText(self.absolutePath_get(path))

    def cacheBustToken_make(self, path: str) -> str:
        """
        Append a modification-time version to the file name of a path

        Args:
            path: Web path (e.g., "/assets/styles/app.css")

        Returns:
            Path with "?v=<mtime>" after the file name, or the path unchanged
            if the file cannot be stat'ed

        Raises:
            MissingAsset: In debug mode, if the file cannot be stat'ed
        """
        basename = posixpath.basename(path)
        if not basename:
            return path

        absolute = self.absolutePath_get(path)
        try:
            if not self.filesystem.exists(absolute):
                raise FileNotFoundError(absolute)
            updated_at = self.filesystem.lastModifiedTime(absolute)
        except OSError as e:
            if self.debug:
                raise MissingAsset(f"Cannot version '{path}': {e}") from e
            WARN(f"Asset '{path}' not found, linking without cache busting")
            return path

        return f"{path}?v={updated_at}"


class AssetLoader:
    """
    Builds link, script, style and preload markup for assets

    Methods taking a filepath work on web paths; the asset_* methods take
    folder::file tokens and pick markup by file kind.
    """

    def __init__(self, resolver: AssetResolver) -> None:
        self.resolver = resolver

    @staticmethod
    def tag_build(tag: str, attributes: Attributes, selfClosing: bool = False) -> str:
        attribute_string = attributes_build(attributes)
        opening = f"<{tag} {attribute_string}" if attribute_string else f"<{tag}"
        return f"{opening} />" if selfClosing else f"{opening}>"

    # Per-type helpers

    def css_link(self, filepath: str, attributes: Optional[Dict[Any, Any]] = None) -> str:
        self.resolver.file_exists(filepath)
        return self.tag_build('link', {
            **(attributes or {}),
            'href': self.resolver.cacheBustToken_make(filepath),
            'rel': 'stylesheet',
        }, selfClosing=True)

    def js_link(self, filepath: str, attributes: Optional[Dict[Any, Any]] = None) -> str:
        self.resolver.file_exists(filepath)
        opening = self.tag_build('script', {
            **(attributes or {}),
            'src': self.resolver.cacheBustToken_make(filepath),
        })
        return f"{opening}</script>"

    def css_inline(self, filepath: str, attributes: Optional[Dict[Any, Any]] = None) -> str:
        css = self.resolver.contents_get(filepath) or ''
        return f"{self.tag_build('style', attributes or {})}\n  {css}\n</style>"

    def js_inline(self, filepath: str, attributes: Optional[Dict[Any, Any]] = None) -> str:
        js = self.resolver.contents_get(filepath) or ''
        return f"{self.tag_build('script', attributes or {})}\n  {js}\n</script>"

    def css_preload(self, filepath: str) -> str:
        return self.tag_build('link', {
            'rel': 'preload',
            'href': self.resolver.cacheBustToken_make(filepath),
            'as': 'style',
        }, selfClosing=True)

    def js_preload(self, filepath: str) -> str:
        return self.tag_build('link', {
            'rel': 'preload',
            'href': self.resolver.cacheBustToken_make(filepath),
            'as': 'script',
        }, selfClosing=True)

    def font_preload(self, filepath: str) -> str:
        return self.tag_build('link', {
            'rel': 'preload',
            'href': filepath,
            'as': 'font',
            0: 'crossorigin',
        }, selfClosing=True)

    # Token helpers

    def asset_link(self, folderFile: str, attributes: Optional[Dict[Any, Any]] = None) -> str:
        """
        Link a stylesheet or script by token

        Raises:
            UnsupportedAssetType: If the file is neither CSS nor JS
        """
        reference = self.resolver.resolve(folderFile)
        if reference.kind is FileKind.CSS:
            return self.css_link(reference.path, attributes)
        if reference.kind is FileKind.JS:
            return self.js_link(reference.path, attributes)
        raise UnsupportedAssetType(f"'{folderFile}' is not a CSS or JS file and cannot be linked")

    def asset_inline(self, folderFile: str, attributes: Optional[Dict[Any, Any]] = None) -> str:
        """
        Inline a stylesheet or script by token

        Raises:
            UnsupportedAssetType: If the file is neither CSS nor JS
        """
        reference = self.resolver.resolve(folderFile)
        if reference.kind is FileKind.CSS:
            return self.css_inline(reference.path, attributes)
        if reference.kind is FileKind.JS:
            return self.js_inline(reference.path, attributes)
        raise UnsupportedAssetType(f"'{folderFile}' is not a CSS or JS file and cannot be inlined")

    def asset_preload(self, folderFile: str) -> str:
        """
        Preload a stylesheet, script or font by token

        Raises:
            UnsupportedAssetType: If the file is not CSS, JS or a font
        """
        reference = self.resolver.resolve(folderFile)
        if reference.kind is FileKind.CSS:
            return self.css_preload(reference.path)
        if reference.kind is FileKind.JS:
            return self.js_preload(reference.path)
        if reference.kind is FileKind.FONT:
            return self.font_preload(reference.path)
        raise UnsupportedAssetType(f"'{folderFile}' is not a CSS, JS or font file and cannot be preloaded")

    def assets_link(self, folderFiles: Iterable[str]) -> str:
        return '\n'.join(self.asset_link(folderFile) for folderFile in folderFiles)

    def assets_inline(self, folderFiles: Iterable[str]) -> str:
        return '\n'.join(self.asset_inline(folderFile) for folderFile in folderFiles)

    def assets_preload(self, folderFiles: Iterable[str]) -> str:
        return "\n".join(self.asset_preload(folderFile) for folderFile in folderFiles)
