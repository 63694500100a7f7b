"""Error taxonomy shared by the analyzers.

Fatal errors propagate unchanged to the caller, which reports them and exits
non-zero. ``NoGoFilesError`` is the only skip signal and never escapes
``generate``.
"""

from pathlib import Path


class GoumlError(Exception):
    """Base class for all gouml errors."""


class RootPathError(GoumlError):
    """Raised when the analysis root cannot be resolved or inspected."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"stat root {self.path}: {reason}")


class ModuleFileError(GoumlError):
    """Raised when a go.mod file exists but cannot be read or has no module line."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class GoParseError(GoumlError):
    """Raised when a source file that passed filtering is not valid Go.

    Attributes:
        path: File that failed to parse
        line: 1-based line of the first syntax error (0 if unknown)
        column: 1-based column of the first syntax error (0 if unknown)
    """

    def __init__(self, path: Path | str, message: str, line: int = 0, column: int = 0) -> None:
        self.path = str(path)
        self.line = line
        self.column = column
        location = f"{self.path}:{line}:{column}" if line else self.path
        super().__init__(f"parse {location}: {message}")


class TreeSitterUnavailableError(GoumlError):
    """Raised when tree-sitter or its Go grammar cannot be loaded.

    No fallback parser exists: without tree-sitter the run fails.
    """

    def __init__(self, message: str | None = None) -> None:
        self.message = message or (
            "tree-sitter Go grammar is not available. "
            "Install tree-sitter-language-pack."
        )
        super().__init__(self.message)


class NoGoFilesError(GoumlError):
    """Signals that a directory has no eligible Go files after filtering."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = str(directory)
        super().__init__(f"no Go files in {self.directory}")


class UploadError(GoumlError):
    """Raised when uploading the artifact fails."""


class WalkError(GoumlError):
    """Raised when a directory cannot be listed during the tree walk."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"walk {self.path}: {reason}")
