r"""
Alias macro expansion over raw Markdown source

Runs before Markdown parsing. Each configured alias turns {name} into its
replaceWith string and {/name} into its end string:

    >>> aliases = [AliasEntry(alias="greet", replaceWith="<b>", end="</b>")]
    >>> aliases_replace("{greet}Hi{/greet}", aliases)
    '<b>Hi</b>'

Backslash escapes are skipped untouched, so \{greet\} stays literal (the
Markdown parser later turns it into plain braces). A {...} span holding
another { is not a macro; scanning restarts at the inner brace, which means
the innermost span is the candidate. Unknown names and unterminated braces
are left as literal text.
"""

from typing import Optional, Sequence

from ..models.macros import MacroSpan
from ..models.project import AliasEntry
from .errors import MalformedEscapeError

# Returned by escape_skip when an escaped macro never closes
ESCAPE_UNTERMINATED = -1


def escape_skip(s: str, index: int) -> int:
    r"""
    Find the last character of the escape sequence starting at index

    Args:
        s: String being scanned
        index: Position of a backslash

    Returns:
        index unchanged if s[index] is not a backslash;
        index + 1 for an ordinary two-character escape (\*, \\, ...);
        the position of the closing brace for an escaped macro \{...},
        counting nested braces;
        ESCAPE_UNTERMINATED if that closing brace never comes.

    Example:
        >>> escape_skip(r"\{a{b}}x", 0)
        6
        >>> escape_skip(r"\*x", 0)
        1
    """
    if s[index] != '\\':
        return index

    if index + 1 >= len(s) or s[index + 1] != '{':
        return index + 1

    depth = 0
    for pos in range(index + 1, len(s)):
        if s[pos] == '{':
            depth += 1
        elif s[pos] == '}':
            depth -= 1
            if depth == 0:
                return pos

    return ESCAPE_UNTERMINATED


def alias_lookup(name: str, aliases: Sequence[AliasEntry]) -> Optional[AliasEntry]:
    """First entry whose alias equals name, in configured order"""
    for entry in aliases:
        if entry.alias == name:
            return entry
    return None


def macro_isolate(source: str, start: int) -> Optional[MacroSpan]:
    """
    Isolate the {...} span opened at start

    Returns:
        MacroSpan for a balanced span with no inner brace, otherwise None.
        Callers distinguish "inner brace" from "no closing brace" with
        source.find('{', start + 1).
    """
    closing = start + 1 < len(source) and source[start + 1] == '/'
    for pos in range(start + 1, len(source)):
        if source[pos] == '{':
            return None
        if source[pos] == '}':
            text = source[start:pos + 1]
            name = text[2 if closing else 1:-1]
            return MacroSpan(text=text, name=name, start=start, end=pos, closing=closing)
    return None


def aliases_replace(source: str, aliases: Sequence[AliasEntry], filepath: str = "") -> str:
    r"""
    Expand alias macros in one forward pass

    When a macro matches, every occurrence of the exact span text from the
    current position onward is replaced at once, and scanning resumes just
    after the replacement inserted at the current position.

    Args:
        source: Raw Markdown text
        aliases: Alias table, first match wins
        filepath: Source path, used in diagnostics only

    Returns:
        Source with all recognized macros replaced

    Raises:
        MalformedEscapeError: An escaped macro \{... has no closing brace

    Example:
        >>> entry = AliasEntry(alias="x", replaceWith="<i>", end="</i>")
        >>> aliases_replace(r"{x}a{/x} \{x\} {y}", [entry])
        '<i>a</i> \\{x\\} {y}'
    """
    if not aliases:
        return source

    markdown = source
    index = 0
    while index < len(markdown):
        char = markdown[index]

        if char == '\\':
            end = escape_skip(markdown, index)
            if end == ESCAPE_UNTERMINATED:
                raise MalformedEscapeError(filepath, index)
            index = end + 1
            continue

        if char != '{':
            index += 1
            continue

        span = macro_isolate(markdown, index)
        if span is None:
            inner = markdown.find('{', index + 1)
            closer = markdown.find('}', index + 1)
            if inner != -1 and (closer == -1 or inner < closer):
                index = inner
            else:
                index += 1
            continue

        entry = alias_lookup(span.name, aliases)
        if entry is None:
            index = span.end + 1
            continue

        replacement = entry.end if span.closing else entry.replaceWith
        markdown = markdown[:index] + markdown[index:].replace(span.text, replacement)
        index += len(replacement)

    return markdown
