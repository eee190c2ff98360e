"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PLATECRAFT_ prefix (e.g., PLATECRAFT_DEBUG_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PLATECRAFT_ prefix.

    Examples:
        PLATECRAFT_ASSET_DEFINITIONS="css::/assets/styles
        js::/assets/scripts"
        PLATECRAFT_DEBUG_MODE=true
        PLATECRAFT_ASSET_ROOT=/var/www/site
    """

    model_config = SettingsConfigDict(
        env_prefix="PLATECRAFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Asset loader configuration
    asset_definitions: str = Field(
        default="",
        description="Folder definitions, one 'name::path' per line",
    )

    asset_root: str = Field(
        default=".",
        description="Filesystem root that resolved asset paths are relative to",
    )

    http_root: str = Field(
        default="",
        description="Scheme and host prefixed to asset paths when an absolute URL is requested",
    )

    font_extensions: List[str] = Field(
        default=["woff", "woff2", "ttf", "otf", "svg", "eot"],
        description="File extensions treated as font assets",
    )

    # Failure policy
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: unknown asset folders raise instead of resolving best-effort",
    )

    debug_mode: bool = Field(
        default=False,
        description="Debug mode: missing asset files raise instead of degrading silently",
    )

    # Template syntax
    folder_delimiter: str = Field(
        default="::",
        description="Separates folder from file in asset tokens and template names",
    )

    batch_delimiter: str = Field(
        default="|",
        description="Separates transform names in a batch/capture pipeline string",
    )

    # Logging
    verbosity: int = Field(
        default=1,
        description="Default verbosity of render passes (1-3)",
    )

    def transformNames_split(self, functions: str) -> List[str]:
        """
        Split a pipeline string into individual transform names.

        Args:
            functions: Pipeline string (e.g., "trim|upper")

        Returns:
            Transform names with surrounding whitespace removed, empties dropped

        Example:
            >>> settings = AppSettings()
            >>> settings.transformNames_split("trim | upper|")
            ['trim', 'upper']
        """
        names = [name.strip() for name in functions.split(self.batch_delimiter)]
        return [name for name in names if name]

    def templateName_is(self, name: str) -> bool:
        """
        Check if a string looks like a namespaced template name.

        Example:
            >>> settings = AppSettings()
            >>> settings.templateName_is("components::card")
            True
        """
        return self.folder_delimiter in name


# Singleton instance - import this in your code
appsettings = AppSettings()
