"""Go source parsing via tree-sitter.

Parses one file into a syntax tree (comments retained as nodes) and reads its
package clause. tree-sitter recovers from syntax errors, but a tree containing
errors is rejected: malformed source fails the whole run.

NOTE: tree-sitter is a required dependency. No fallback parsing is
implemented - if the Go grammar cannot be loaded, analysis fails.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gouml.analyzers.base import GoParseError, TreeSitterUnavailableError
from gouml.analyzers.go_syntax import node_text

LANGUAGE = "go"


@dataclass
class ParsedFile:
    """A successfully parsed Go file.

    Attributes:
        path: Absolute file path
        package_name: Name from the package clause
        source: Raw file contents
        root: Root node of the syntax tree (``source_file``)
    """

    path: Path
    package_name: str
    source: bytes
    root: Any

    def declarations(self, *kinds: str) -> list[Any]:
        """Return top-level declaration nodes of the given kinds, in source order."""
        return [child for child in self.root.named_children if child.type in kinds]


def _first_error(node: Any) -> Any | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


class GoParser:
    """Go parser using tree-sitter.

    The tree-sitter parser is created lazily on first use and reused for
    every file of the run.
    """

    def __init__(self) -> None:
        """Initialize the Go parser."""
        self._parser: Any = None
        self._init_error: str | None = None

    def _ensure_initialized(self) -> None:
        """Initialize the tree-sitter Go parser.

        Raises:
            TreeSitterUnavailableError: If tree-sitter cannot be initialized
        """
        if self._parser is not None:
            return

        if self._init_error:
            raise TreeSitterUnavailableError(self._init_error)

        try:
            from tree_sitter_language_pack import get_parser
        except ImportError as e:
            self._init_error = f"tree-sitter-language-pack not installed: {e}"
            raise TreeSitterUnavailableError(self._init_error) from e

        try:
            self._parser = get_parser(LANGUAGE)
        except Exception as e:
            self._init_error = f"Failed to initialize parser for {LANGUAGE}: {e}"
            raise TreeSitterUnavailableError(self._init_error) from e

    def ensure_available(self) -> None:
        """Load the Go grammar now instead of on the first parse.

        Raises:
            TreeSitterUnavailableError: If tree-sitter cannot be initialized
        """
        self._ensure_initialized()

    def check_available(self) -> bool:
        """Check if tree-sitter and the Go grammar are available.

        Returns:
            True if the parser is functional, False otherwise
        """
        try:
            self._ensure_initialized()
            return True
        except TreeSitterUnavailableError:
            return False

    def parse_source(self, source: bytes, path: Path) -> ParsedFile:
        """Parse Go source code.

        Args:
            source: Source bytes
            path: File path, used for error reporting

        Returns:
            ParsedFile with the syntax tree and package name

        Raises:
            GoParseError: If the source has syntax errors or no package clause
        """
        self._ensure_initialized()
        tree = self._parser.parse(source)
        root = tree.root_node

        error = _first_error(root)
        if error is not None:
            row, column = error.start_point[0], error.start_point[1]
            if error.is_missing:
                message = f"expected {error.type}"
            else:
                snippet = node_text(error, source).strip().splitlines()
                message = f"syntax error near {snippet[0]!r}" if snippet else "syntax error"
            raise GoParseError(path, message, line=row + 1, column=column + 1)

        package_name = self._package_name(root, source)
        if not package_name:
            raise GoParseError(path, "expected 'package' clause", line=1, column=1)

        return ParsedFile(path=path, package_name=package_name, source=source, root=root)

    def parse_file(self, path: Path) -> ParsedFile:
        """Read and parse a single Go file.

        Raises:
            GoParseError: If the file cannot be read or is not valid Go
        """
        try:
            source = path.read_bytes()
        except OSError as e:
            raise GoParseError(path, f"read failed: {e.strerror or e}") from e
        return self.parse_source(source, path)

    def _package_name(self, root: Any, source: bytes) -> str:
        for child in root.named_children:
            if child.type == "package_clause":
                for pkg_child in child.named_children:
                    if pkg_child.type == "package_identifier":
                        return node_text(pkg_child, source)
        return ""
