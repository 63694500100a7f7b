"""Per-file eligibility rules for Go analysis."""

from dataclasses import dataclass
from pathlib import Path

from gouml.models.options import ExtractOptions

GO_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"

# Header sniffing stops after this many lines
GENERATED_SCAN_LINES = 20
GENERATED_MARKER = "Code generated"
DO_NOT_EDIT_MARKER = "DO NOT EDIT"


def is_generated_file(path: Path | str) -> bool:
    """Check whether a file carries a generated-code header.

    A file is generated when one of its first 20 lines contains both
    "Code generated" and "DO NOT EDIT".

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, encoding="utf-8", errors="replace") as f:
        for i, line in enumerate(f):
            if i >= GENERATED_SCAN_LINES:
                break
            if GENERATED_MARKER in line and DO_NOT_EDIT_MARKER in line:
                return True
    return False


@dataclass
class FileFilter:
    """Decides whether a candidate file in a directory takes part in analysis.

    Attributes:
        options: Extraction options (tests and generated-file inclusion)
        only_file: Restrict to this file name (single-file mode)
    """

    options: ExtractOptions
    only_file: str = ""

    def accept(self, directory: Path | str, name: str) -> bool:
        """Return True if ``name`` in ``directory`` should be parsed."""
        if not name.endswith(GO_SUFFIX):
            return False
        if self.only_file and name != self.only_file:
            return False
        if not self.options.include_tests and name.endswith(TEST_SUFFIX):
            return False
        if not self.options.include_generated:
            try:
                if is_generated_file(Path(directory) / name):
                    return False
            except OSError:
                # Unreadable header: treat as hand-written
                return True
        return True
