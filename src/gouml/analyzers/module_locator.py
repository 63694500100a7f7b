"""Module detection for Go source trees.

Finds the go.mod that encloses a directory by walking parent directories.
Results are cached per directory for the lifetime of one locator, so every
directory below a module root resolves in O(1) after the first lookup.
"""

import os
from pathlib import Path

from gouml.analyzers.base import ModuleFileError
from gouml.models.uml import Module

GO_MOD_FILE = "go.mod"


def read_module_path(go_mod_path: Path | str) -> str:
    """Read the module path declared in a go.mod file.

    Accepts both ``module example.com/m`` and ``module<TAB>example.com/m``.

    Args:
        go_mod_path: Path to go.mod

    Returns:
        Declared module path

    Raises:
        ModuleFileError: If the file cannot be read or declares no module
    """
    try:
        with open(go_mod_path, encoding="utf-8", errors="replace") as f:
            for raw_line in f:
                line = raw_line.strip()
                for prefix in ("module ", "module\t"):
                    if line.startswith(prefix):
                        return _clean_module_path(line[len(prefix):])
    except OSError as e:
        raise ModuleFileError(go_mod_path, f"open failed: {e.strerror or e}") from e

    raise ModuleFileError(go_mod_path, "no module path")


def _clean_module_path(value: str) -> str:
    """Strip trailing line comments and quoting from a module path."""
    value = value.split("//", 1)[0].strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"`":
        value = value[1:-1]
    return value


class ModuleLocator:
    """Resolves the enclosing Go module of a directory.

    The cache maps cleaned absolute directory paths to their module (or
    None when no go.mod exists up to the filesystem root). It is append-only
    and scoped to one run.
    """

    def __init__(self) -> None:
        """Initialize an empty locator cache."""
        self._cache: dict[str, Module | None] = {}

    def module_for_dir(self, directory: Path | str) -> Module | None:
        """Find the module enclosing ``directory``.

        Args:
            directory: Directory to resolve

        Returns:
            The nearest enclosing Module, or None if there is none

        Raises:
            ModuleFileError: If a go.mod on the way up is unreadable or malformed
        """
        key = os.path.normpath(os.path.abspath(directory))
        if key in self._cache:
            return self._cache[key]

        go_mod = os.path.join(key, GO_MOD_FILE)
        if os.path.exists(go_mod):
            module = Module(path=read_module_path(go_mod), dir=key)
            self._cache[key] = module
            return module

        parent = os.path.dirname(key)
        if parent == key:
            self._cache[key] = None
            return None

        module = self.module_for_dir(parent)
        self._cache[key] = module
        return module

    def import_path_for_dir(self, directory: Path | str) -> str:
        """Derive the import path of a directory.

        Returns:
            Module path joined with the module-relative directory, or an empty
            string when the directory has no enclosing module
        """
        module = self.module_for_dir(directory)
        if module is None:
            return ""
        rel = os.path.relpath(os.path.abspath(directory), module.dir)
        if rel == ".":
            return module.path
        return f"{module.path}/{Path(rel).as_posix()}"

    @property
    def cached_dirs(self) -> int:
        """Return the number of directories resolved so far."""
        return len(self._cache)
