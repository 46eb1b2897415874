"""
Compiler for snapsite projects

Turns a project's Markdown sources into HTML pages.

Per file:
    raw text -> aliases_replace -> Parser -> textRuns_consolidate
             -> LinkRewriter -> HtmlRenderer -> template -> output format

Per site:
    clean output dir, render every Markdown file, bundle JavaScript into
    one script, copy assets.

The first error aborts the run; a page is only written once it has been
rendered completely.
"""

import fnmatch
import glob
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from bs4 import BeautifulSoup, Comment, NavigableString
from pydantic import ValidationError

from ..config import AppSettings, appsettings
from ..models.project import SnapProject
from ..models.rewrite import RewriteConfig
from .aliases import aliases_replace
from .errors import ProjectError
from .log import LOG, action_log
from .parser import Parser
from .renderer import HtmlRenderer
from .transforms import LinkRewriter, textRuns_consolidate
from .tree import Node, tree_dump

# Whitespace inside these elements is content and survives minification
WHITESPACE_PRESERVING = ["pre", "textarea", "script", "style", "code"]


def text_read(path: Path) -> str:
    """
    Read a UTF-8 text file

    Raises:
        ProjectError: The file is not valid UTF-8
    """
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ProjectError(f"Not valid UTF-8: {e}", filepath=str(path)) from e


def project_load(path: Path) -> SnapProject:
    """
    Read and validate a project file

    Keys missing from the file take their defaults from SnapProject.

    Args:
        path: Path to snap.json

    Returns:
        Validated, immutable project model

    Raises:
        ProjectError: File missing, not UTF-8, not JSON, or failing validation. All
            validation problems are listed in one diagnostic line.
    """
    if not path.is_file():
        raise ProjectError("Couldn't find project config", filepath=str(path))

    try:
        return SnapProject.model_validate_json(text_read(path))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'} {err['msg']}"
            for err in e.errors()
        )
        raise ProjectError(f"Failed validating JSON: {problems}", filepath=str(path)) from e


class Compiler:
    """
    Compiles a snapsite project to a static site

    Responsibilities:
    - Discover source files from the project's glob patterns
    - Run the per-file macro/rewrite/render pipeline
    - Apply the page template and output format
    - Bundle scripts and copy assets
    """

    def __init__(
        self,
        project: SnapProject,
        base_path: str,
        output_dir: str,
        verbosity: int = 1,
        dry_run: bool = False,
        debug: bool = False,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Initialize compiler

        Args:
            project: Validated project model
            base_path: Project directory; all patterns are relative to it
            output_dir: Directory for compiled output
            verbosity: Output verbosity level (0-3)
            dry_run: Log actions without writing anything
            debug: Log the parse tree after each pass (verbosity 3)
            settings: Tool settings, defaults to the environment-backed singleton
        """
        self.project = project
        self.base_path = Path(base_path)
        self.output_dir = Path(output_dir)
        self.verbosity = verbosity
        self.dry_run = dry_run
        self.settings = settings or appsettings
        self.debug = debug or self.settings.debug_mode

        self.renderer = HtmlRenderer(
            softbreak=self.settings.softbreak,
            highlight_code=self.settings.highlight_code,
            pygments_style=self.settings.pygments_style,
        )
        link_renderer = HtmlRenderer(softbreak=self.settings.softbreak)
        external = project.linkTags.external
        self.rewrite_config = RewriteConfig(
            external_html=external.html,
            prepend=external.prepend,
            render_inline=link_renderer.render,
        )
        self.template_cache: Optional[str] = None

    def compile(self) -> Dict[str, Any]:
        """
        Compile every page, bundle scripts and copy assets

        Returns:
            dict with compilation results:
                status: True
                output_dir: Output directory
                page_count: Number of pages rendered
                pages: Paths of rendered pages (would-be paths on a dry run)

        Raises:
            SnapError: Any failure; nothing further is written
        """
        LOG("Starting compilation...", level=2)
        if self.dry_run:
            LOG("(This is a dry run. No output files will be written.)", level=1)

        self.outputDir_prepare()
        targets = self.targets_gather()

        pages: List[str] = []
        for relpath in targets["markdown"]:
            self.action_log(relpath, "render")
            rendered = self.template_apply(self.file_render(self.base_path / relpath))

            destination = self.output_dir / f"{Path(relpath).stem}.html"
            self.action_log(destination, "output")
            if not self.dry_run:
                destination.write_text(rendered, encoding="utf-8")
            pages.append(str(destination))

        self.scripts_bundle(targets["javascript"])
        self.assets_copy(targets["assets"])

        LOG(f"Site deployed to {self.output_dir}", level=1)
        return {
            "status": True,
            "output_dir": str(self.output_dir),
            "page_count": len(pages),
            "pages": pages,
        }

    def file_render(self, filepath: Path) -> str:
        """
        Render one Markdown file to an HTML fragment (no template)

        Raises:
            ProjectError: File missing, not a regular file or not UTF-8
            MalformedEscapeError: Unterminated escaped macro in the source
            StructuralMisuseError: Rewrite pass inconsistency
        """
        if not filepath.is_file():
            raise ProjectError("File not found", filepath=str(filepath))

        source = text_read(filepath)
        LOG(f"Read {len(source)} characters from {filepath.name}", level=3)

        markdown = aliases_replace(source, self.project.aliases, filepath=str(filepath))
        tree = Parser(markdown, filepath=str(filepath)).parse()
        self.tree_log("RAW AST", tree)

        textRuns_consolidate(tree)
        self.tree_log("CONSOLIDATED AST", tree)

        LinkRewriter(self.rewrite_config, filepath=str(filepath)).rewrite(tree)
        self.tree_log("FINAL AST", tree)

        return self.renderer.render(tree)

    def action_log(self, filepath: Any, action: str) -> None:
        """File actions show at normal verbosity on a dry run, verbose otherwise"""
        action_log(filepath, action, level=1 if self.dry_run else 2)

    def tree_log(self, title: str, tree: Node) -> None:
        """Parse tree dumps show whenever debug is on, at any verbosity"""
        if self.debug:
            LOG(f"\n{title}\n{tree_dump(tree)}", level=1)

    def template_read(self) -> str:
        """Read the page template once per compile run"""
        if self.template_cache is None:
            template_path = self.base_path / self.project.template
            if not template_path.exists():
                raise ProjectError("Template file not found", filepath=str(template_path))
            if not template_path.is_file():
                raise ProjectError("Template is not a file", filepath=str(template_path))
            self.template_cache = text_read(template_path)
        return self.template_cache

    def template_apply(self, html: str) -> str:
        """Insert page HTML at every content marker and format the result"""
        page = self.template_read().replace(self.settings.content_marker, html)
        return self.output_format(page)

    def output_format(self, page: str) -> str:
        """
        Apply the project's outputFormat

        raw: unchanged
        prettify: BeautifulSoup's indented serialization
        minify: comments and whitespace-only text between tags removed
        """
        if self.project.outputFormat == "raw":
            return page

        soup = BeautifulSoup(page, "html.parser")
        if self.project.outputFormat == "prettify":
            return soup.prettify()

        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()
        for text in soup.find_all(string=True):
            if (
                isinstance(text, NavigableString)
                and not text.strip()
                and text.find_parent(WHITESPACE_PRESERVING) is None
            ):
                text.extract()
        return str(soup)

    def outputDir_prepare(self) -> None:
        """Remove any previous build and recreate the output directory"""
        output = self.output_dir.resolve()
        base = self.base_path.resolve()
        if output == base or output in base.parents:
            raise ProjectError(
                "Output directory would contain the project; refusing to clean it",
                filepath=str(self.output_dir),
            )

        if self.output_dir.exists():
            self.action_log(self.output_dir, "clean")
            if not self.dry_run:
                shutil.rmtree(self.output_dir)
        if not self.dry_run:
            self.output_dir.mkdir(parents=True, exist_ok=True)

    def targets_gather(self) -> Dict[str, List[str]]:
        """
        Resolve the project's glob patterns

        Returns:
            dict of markdown/javascript/assets -> project-relative POSIX paths,
            in pattern order, without duplicates, directories or ignored files
        """
        ignore = list(self.project.ignore) + [f"{self.project.output}/**"]
        return {
            "markdown": self.files_glob(self.project.markdown, ignore),
            "javascript": self.files_glob(self.project.javascript, ignore),
            "assets": self.files_glob(self.project.assets, ignore),
        }

    def files_glob(self, patterns: Sequence[str], ignore: Sequence[str]) -> List[str]:
        found: List[str] = []
        for pattern in patterns:
            for match in sorted(glob.glob(pattern, root_dir=self.base_path, recursive=True)):
                relpath = Path(match).as_posix()
                if not (self.base_path / relpath).is_file():
                    continue
                if any(fnmatch.fnmatch(relpath, skip) for skip in ignore):
                    continue
                if relpath not in found:
                    found.append(relpath)
        return found

    def scripts_bundle(self, scripts: Sequence[str]) -> None:
        """Concatenate scripts into one file, each headed by its path"""
        parts = []
        for relpath in scripts:
            self.action_log(relpath, "import")
            source = text_read(self.base_path / relpath)
            parts.append(f"// {relpath}\n{source}\n")

        script_path = self.output_dir / self.settings.script_filename
        self.action_log(script_path, "output")
        if not self.dry_run:
            script_path.write_text("".join(parts), encoding="utf-8")

    def assets_copy(self, assets: Sequence[str]) -> None:
        """Copy assets into the output directory, keeping relative paths"""
        for relpath in assets:
            self.action_log(relpath, "copy")
            if self.dry_run:
                continue
            destination = self.output_dir / relpath
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.base_path / relpath, destination)
