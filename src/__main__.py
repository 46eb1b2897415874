#!/usr/bin/env python3
"""
snapsite - Markdown static site compiler

Compiles a directory of Markdown pages, scripts and assets into a static
site, driven by a snap.json project file.

As with the rest of this family of tools, the CLI is built on the ChRIS
"plugin" pattern as a general purpose python app framework.

Features:
    - Alias macros: {note}...{/note} expand to configured markup before
      Markdown parsing (escape with \\{note\\} to keep them literal)
    - External links open in a new window and can carry decoration markup
    - Image alt text doubles as the mouseover title
    - One HTML template for every page, raw/prettified/minified output

Usage:
    snapsite inputdir/ outputdir/

    inputdir must contain snap.json (or pass --projectFile). Pages are
    written to outputdir/<output>, where <output> comes from the project.

Examples:
    # Basic compilation
    snapsite mysite/ out/

    # Different project file, log what would happen without writing
    snapsite mysite/ out/ --projectFile staging.json --dryRun

    # Dump the parse tree after each pass
    snapsite mysite/ out/ --debug
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from . import __version__
from .config import appsettings
from .lib import Compiler, LOG, state_connectToLogger
from .lib.compiler import project_load
from .lib.errors import SnapError
from .lib.log import error_log
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
                            _ _
  ___ _ __   __ _ _ __  ___(_) |_ ___
 / __| '_ \ / _` | '_ \/ __| | __/ _ \
 \__ \ | | | (_| | |_) \__ \ | ||  __/
 |___/_| |_|\__,_| .__/|___/_|\__\___|
                 |_|
  Markdown static site compiler
"""

# Define CLI arguments
parser = ArgumentParser(
    description="snapsite - Markdown static site compiler with alias macros",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--projectFile",
    default="",
    type=str,
    help=f"Project file relative to inputdir (default: {appsettings.project_filename})",
)

parser.add_argument(
    "--dryRun",
    action="store_true",
    default=False,
    help="Log what would be done without writing any files",
)

parser.add_argument(
    "--debug",
    action="store_true",
    default=False,
    help="Log the parse tree after each transform pass",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def project_check(inputstate: ProgramState) -> ProgramState:
    """
    Locate and validate the project file, resolve the output directory.

    Returns:
        ProgramState with added fields:
            - projectPath: Resolved project file
            - project: Validated SnapProject
            - htmlOutputdir: outputdir / project.output
            - projectOK: True

    Exits:
        1 if the project file is missing or invalid
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    project_file = state.projectFile or appsettings.project_filename
    state.projectPath = state.inputdir / project_file
    LOG(f"Building from {state.projectPath}...", level=1)

    try:
        state.project = project_load(state.projectPath)
    except SnapError as e:
        error_log(str(e))
        state.projectOK = False
        sys.exit(1)

    state.htmlOutputdir = state.outputdir / state.project.output
    LOG(f"Output directory: {state.htmlOutputdir}", level=2)

    state.projectOK = True
    return state


def site_compile(inputstate: ProgramState) -> ProgramState:
    """
    Compile every page of the project and deploy scripts and assets.

    Returns:
        ProgramState with added field:
            - compileResult: Dict containing:
                - status: bool (compilation success)
                - output_dir: str
                - page_count: int
                - pages: list of page paths

    Exits:
        1 on the first compile error (diagnostic printed to stderr)
    """
    state = inputstate.copy()

    if not state.project:
        print("Error: No project loaded", file=sys.stderr)
        sys.exit(1)

    compiler = Compiler(
        project=state.project,
        base_path=str(state.inputdir),
        output_dir=str(state.htmlOutputdir),
        verbosity=state.verbosity,
        dry_run=state.dryRun,
        debug=state.debug,
    )
    try:
        state.compileResult = compiler.compile()
    except SnapError as e:
        error_log(str(e))
        sys.exit(1)
    except OSError as e:
        error_log(f"Compilation error: {e}")
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display compilation results.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if compileResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.compileResult:
        print("Error: Compilation failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Compilation successful!", level=1)
    LOG(f"  Output: {state.compileResult['output_dir']}", level=1)
    LOG(f"  Pages:  {state.compileResult['page_count']}", level=1)
    if state.dryRun:
        LOG("  (dry run: nothing was written)", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="snapsite - Markdown static site compiler",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - compile a snapsite project to a static site.

    Orchestrates the full compilation pipeline:
        1. project_check: Find and validate the project file
        2. site_compile: Render pages, bundle scripts, copy assets
        3. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - projectFile: str - Project file name (default snap.json)
            - dryRun: bool - Log only, write nothing
            - debug: bool - Dump parse trees
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Site directory
        outputdir: Directory where the compiled site will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, project_check, site_compile, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
