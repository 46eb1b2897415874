"""
snapsite - Markdown static site compiler

Alias macros, link/image rewriting and templated HTML output for
Markdown-authored sites.
"""

__version__ = "1.0.0"

from .lib import Parser, Compiler, HtmlRenderer, LinkRewriter, LOG, state_connectToLogger

__all__ = [
    "Parser",
    "Compiler",
    "HtmlRenderer",
    "LinkRewriter",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
