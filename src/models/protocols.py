"""
Collaborator interfaces

The capture and embed core only talks to the host engine and the file
system through these protocols, so tests can substitute recording fakes.
"""

from typing import Any, Callable, Mapping, Protocol, runtime_checkable


@runtime_checkable
class TemplateHost(Protocol):
    """The host templating engine"""

    def register_function(self, name: str, handler: Callable) -> None:
        """Expose a callable to template bodies under a name"""
        ...

    def render(self, name: str, data: Mapping[str, Any]) -> str:
        """Render a named template with bound data and return the markup"""
        ...

    def insert(self, name: str, data: Mapping[str, Any]) -> None:
        """Render a named template and write the markup to the ambient output"""
        ...


@runtime_checkable
class FileSystem(Protocol):
    """File access needed by the asset helpers; paths are absolute"""

    def exists(self, path: str) -> bool:
        ...

    def lastModifiedTime(self, path: str) -> int:
        ...

    def readAllText(self, path: str) -> str:
        ...
