"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use SNAPSITE_ prefix (e.g., SNAPSITE_HIGHLIGHT_CODE=true).

Settings can also be loaded from a .env file in the project root.

These are tool-level knobs. Per-site options (aliases, globs, link tags)
live in the project file, see models/project.py.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use SNAPSITE_ prefix.

    Examples:
        SNAPSITE_PROJECT_FILENAME=site.json
        SNAPSITE_SOFTBREAK="\\n"
        SNAPSITE_HIGHLIGHT_CODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="SNAPSITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Project configuration
    project_filename: str = Field(
        default="snap.json",
        description="Project file looked up in the input directory",
    )

    # Template configuration
    content_marker: str = Field(
        default="<!--{content}-->",
        description="Marker in the page template replaced by rendered page HTML",
    )

    script_filename: str = Field(
        default="script.js",
        description="Name of the concatenated JavaScript bundle in the output directory",
    )

    # Rendering configuration
    softbreak: str = Field(
        default="<br/>",
        description="Markup emitted for Markdown soft line breaks",
    )

    highlight_code: bool = Field(
        default=False,
        description="Syntax-highlight fenced code blocks with Pygments",
    )

    pygments_style: str = Field(
        default="default",
        description="Pygments style used when highlight_code is enabled",
    )

    # Compilation configuration
    debug_mode: bool = Field(
        default=False,
        description="Log the parse tree after each transform pass",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
