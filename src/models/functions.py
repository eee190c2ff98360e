"""
Template function specification and metadata models

Defines the structure and categories of functions callable from template
bodies, for registration, documentation and lookup.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List


class FunctionCategory(Enum):
    """
    Categories of template functions

    Used for organization and listing.
    """
    EMBED = "embed"              # embed(), startBlock(), blockValue()
    CAPTURE = "capture"          # capture(), batch()
    CONDITIONAL = "conditional"  # tagIf(), attrIf(), match()
    ASSET = "asset"              # linkAsset(), preloadFont()
    CUSTOM = "custom"            # registered by the host application


@dataclass
class FunctionSpec:
    """
    Specification for a template function

    Attributes:
        name: Name templates call the function by
        category: Category for organization
        description: Human-readable description
        handler: Callable (template, *args, **kwargs) -> Any
        examples: Example usage strings
        aliases: Alternative names for the function
    """
    name: str
    category: FunctionCategory
    description: str
    handler: Callable
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)

    def matches(self, function_name: str) -> bool:
        """Check if this spec answers to a function name or one of its aliases"""
        return self.name == function_name or function_name in self.aliases
