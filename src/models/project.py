"""
Project file (snap.json) models

The project file is validated with pydantic. Any key a user leaves out falls
back to the default declared here, so a project file only has to name what
it overrides. Unknown keys are rejected.

Example snap.json:
    {
        "markdown": ["pages/**/*.md"],
        "aliases": [
            {"alias": "note", "replaceWith": "<aside>", "end": "</aside>"}
        ],
        "linkTags": {"external": {"html": " &#8599;", "prepend": false}}
    }
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AliasEntry(BaseModel):
    """
    One alias macro

    {alias} in Markdown source is replaced by replaceWith, and the matching
    {/alias} by end.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    alias: str = Field(description="Macro name matched inside {alias}")
    replaceWith: str = Field(description="Substituted for the opening {alias} tag")
    end: str = Field(default="", description="Substituted for the closing {/alias} tag")


class ExternalLinkTag(BaseModel):
    """Decoration applied to links with an http:, https: or mailto: destination"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    html: str = Field(default="", description="Markup inserted inside each external link")
    prepend: bool = Field(default=False, description="Insert before the link text instead of after")


class LinkTags(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    external: ExternalLinkTag = Field(default_factory=ExternalLinkTag)


class SnapProject(BaseModel):
    """
    A snapsite project

    Attributes:
        markdown: Glob patterns for Markdown sources (relative to project dir)
        javascript: Glob patterns for scripts concatenated into script.js
        assets: Glob patterns for files copied verbatim
        ignore: Glob patterns excluded from all of the above
        aliases: Alias macros, first match wins
        template: HTML template containing the content marker
        output: Output directory name
        outputFormat: raw, prettify or minify
        linkTags: External link decoration
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    markdown: List[str] = Field(default_factory=lambda: ["source/**/*.md"])
    javascript: List[str] = Field(default_factory=lambda: ["source/**/*.js"])
    assets: List[str] = Field(default_factory=lambda: ["assets/**"])
    ignore: List[str] = Field(default_factory=list)
    aliases: List[AliasEntry] = Field(default_factory=list)
    template: str = "template.html"
    output: str = "build"
    outputFormat: Literal["raw", "prettify", "minify"] = "prettify"
    linkTags: LinkTags = Field(default_factory=LinkTags)

    @field_validator("markdown")
    @classmethod
    def markdown_check(cls, value: List[str]) -> List[str]:
        if len(value) < 1:
            raise ValueError(
                "No Markdown input patterns were given (check the 'markdown' property)"
            )
        return value

    @field_validator("output")
    @classmethod
    def output_check(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("No output directory was given (check the 'output' property)")
        return value

