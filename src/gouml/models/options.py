"""Extraction options passed to the model generator."""

from dataclasses import dataclass, field, replace

DEFAULT_EXCLUDE_DIR_NAMES: tuple[str, ...] = (
    ".git",
    ".idea",
    ".vscode",
    "node_modules",
    "testdata",
    "vendor",
)

DEFAULT_INDENT = "  "


@dataclass(frozen=True)
class ExtractOptions:
    """Options controlling which files participate in analysis.

    Attributes:
        include_tests: Include *_test.go files
        include_generated: Include files carrying a "Code generated ... DO NOT EDIT" header
        exclude_dir_names: Directory names pruned from the walk (empty = defaults)
        indent: JSON indentation unit (None = default, "" = compact)
    """

    include_tests: bool = False
    include_generated: bool = False
    exclude_dir_names: frozenset[str] = field(default_factory=frozenset)
    indent: str | None = None

    def with_defaults(self) -> "ExtractOptions":
        """Return a copy with unset options replaced by their defaults."""
        options = self
        if not options.exclude_dir_names:
            options = replace(options, exclude_dir_names=frozenset(DEFAULT_EXCLUDE_DIR_NAMES))
        if options.indent is None:
            options = replace(options, indent=DEFAULT_INDENT)
        return options
