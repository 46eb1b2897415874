"""
Models package for snapsite

Data structures for the project file, the compile pipeline and the
macro/rewrite passes.
"""

from .state import ProgramState, pipeline
from .project import SnapProject, AliasEntry, ExternalLinkTag, LinkTags
from .macros import MacroSpan
from .rewrite import RewriteConfig

__all__ = [
    "ProgramState",
    "pipeline",
    "SnapProject",
    "AliasEntry",
    "ExternalLinkTag",
    "LinkTags",
    "MacroSpan",
    "RewriteConfig",
]
