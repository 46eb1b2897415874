"""
Link/image rewrite configuration

Threaded explicitly into LinkRewriter; nothing here is process-global.
"""

from dataclasses import dataclass
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from ..lib.tree import Node


@dataclass(frozen=True)
class RewriteConfig:
    """
    Settings for the link/image rewrite pass

    Attributes:
        external_html: Decoration markup added inside external links
                       (e.g. '<i class="icon-external"></i>')
        prepend: Put the decoration before the link text instead of after
        render_inline: Renders a subtree to HTML; used to recover the inner
                       markup of a link (e.g. HtmlRenderer().render)
    """
    external_html: str
    prepend: bool
    render_inline: Callable[['Node'], str]
