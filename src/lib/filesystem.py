"""
Local file system access for the asset helpers
"""

import os
from pathlib import Path


class LocalFileSystem:
    """FileSystem implementation over the local disk"""

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def lastModifiedTime(self, path: str) -> int:
        """Modification time in whole seconds; raises OSError if the file cannot be stat'ed"""
        return int(os.stat(path).st_mtime)

    def readAllText(self, path: str) -> str:
        return Path(path).read_text(encoding='utf-8')
