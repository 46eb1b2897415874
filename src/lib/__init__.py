"""
snapsite library: macro expansion, parse tree passes, rendering, compilation
"""

from .aliases import aliases_replace, escape_skip
from .tree import Node, NodeType, Cursor
from .parser import Parser
from .transforms import LinkRewriter, textRuns_consolidate
from .renderer import HtmlRenderer
from .compiler import Compiler, project_load
from .log import LOG, state_connectToLogger

__all__ = [
    "aliases_replace",
    "escape_skip",
    "Node",
    "NodeType",
    "Cursor",
    "Parser",
    "LinkRewriter",
    "textRuns_consolidate",
    "HtmlRenderer",
    "Compiler",
    "project_load",
    "LOG",
    "state_connectToLogger",
]
