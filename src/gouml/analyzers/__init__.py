"""gouml analyzers - syntactic extraction of Go declarations.

Analyzers:
- Module Locator: Nearest enclosing go.mod and import path derivation
- File Filter: Per-file eligibility (tests, generated files, single-file mode)
- Go Parser: tree-sitter parsing of one file
- Declaration Extractor: Types, fields, interface methods, functions and method binding
- Canonicalizer: Deterministic ordering of packages and their members
- Model Generator: Tree walk and assembly of the whole model
"""

from gouml.analyzers.base import (
    GoParseError,
    GoumlError,
    ModuleFileError,
    NoGoFilesError,
    RootPathError,
    TreeSitterUnavailableError,
    UploadError,
    WalkError,
)
from gouml.analyzers.extractor import DeclarationExtractor
from gouml.analyzers.file_filter import FileFilter
from gouml.analyzers.generator import ModelGenerator, generate, generate_json
from gouml.analyzers.go_parser import GoParser, ParsedFile
from gouml.analyzers.module_locator import ModuleLocator

__all__ = [
    "DeclarationExtractor",
    "FileFilter",
    "GoParseError",
    "GoParser",
    "GoumlError",
    "ModelGenerator",
    "ModuleFileError",
    "ModuleLocator",
    "NoGoFilesError",
    "ParsedFile",
    "RootPathError",
    "TreeSitterUnavailableError",
    "UploadError",
    "WalkError",
    "generate",
    "generate_json",
]
