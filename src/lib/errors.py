"""
Exception types for snapsite

Every failure the compile run can hit derives from SnapError. Core passes
raise these and never log; the CLI layer prints str(error) and exits.
"""

from typing import Optional

from .tree import SourcePos


class SnapError(Exception):
    """
    Base class for snapsite failures

    Formats as a single diagnostic line:
        path (line,column): message
        path: message
        message
    """

    def __init__(
        self,
        message: str,
        filepath: str = "",
        sourcepos: Optional[SourcePos] = None,
    ) -> None:
        self.message = message
        self.filepath = filepath
        self.sourcepos = sourcepos
        super().__init__(self.diagnostic())

    def diagnostic(self) -> str:
        if self.filepath and self.sourcepos:
            return (
                f"{self.filepath} ({self.sourcepos.start_line},"
                f"{self.sourcepos.start_column}): {self.message}"
            )
        if self.filepath:
            return f"{self.filepath}: {self.message}"
        return self.message


class MalformedEscapeError(SnapError):
    """
    Raised when an escaped macro \\{... never closes its braces

    index is an offset into the source as expanded up to that point.
    """

    def __init__(self, filepath: str, index: int) -> None:
        self.index = index
        super().__init__(
            f"Unterminated escape sequence starting at offset {index}",
            filepath=filepath,
        )


class StructuralMisuseError(SnapError):
    """Raised when a rewrite routine is handed a node of the wrong type"""
    pass


class ProjectError(SnapError):
    """Raised when the project file, template or a source file is unusable"""
    pass
