"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from .project import SnapProject


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the compilation pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, projectFile, dryRun, debug
        - project_load: projectPath, project, htmlOutputdir, projectOK
        - site_compile: compileResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Site directory holding the project file and sources
        outputdir: Base output directory
        verbosity: Logging verbosity level (1-3)
        projectFile: Project filename (relative to inputdir); empty means
                     the configured default (snap.json)
        dryRun: Log what would be written without touching the disk
        debug: Log the parse tree after each transform pass
        projectOK: Project file was found and validated
        projectPath: Resolved path to the project file
        project: Validated project model
        htmlOutputdir: Final output directory (outputdir / project.output)
        compileResult: Compilation results (output_dir, page_count, pages, status)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    projectFile: str = field(default="")
    dryRun: bool = field(default=False)
    debug: bool = field(default=False)

    # Pipeline state
    projectOK: bool = field(default=False)
    projectPath: Path = field(default=Path("/"))
    project: Optional["SnapProject"] = field(default=None)
    htmlOutputdir: Path = field(default=Path("/"))
    compileResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        CLI options that are not ProgramState fields are ignored.

        Args:
            options: Parsed CLI arguments (projectFile, dryRun, ...)
            inputdir: Site directory
            outputdir: Directory for compilation output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(initial_state, project_load, site_compile, results_report)

    is equivalent to:
        results_report(site_compile(project_load(initial_state)))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
