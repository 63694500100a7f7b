"""Model generation over a Go source tree.

Walks the tree depth-first, prunes excluded directories, parses each
directory's eligible files, extracts one Package per declared package name
and assembles the sorted Model.

Errors surface unchanged to the caller; nothing here logs or prints.
"""

import os
import stat
from collections import defaultdict
from datetime import UTC, datetime
from pathlib import Path

from gouml.analyzers.base import NoGoFilesError, RootPathError, WalkError
from gouml.analyzers.canonical import sort_package, sort_packages
from gouml.analyzers.extractor import DeclarationExtractor
from gouml.analyzers.file_filter import FileFilter
from gouml.analyzers.go_parser import GoParser, ParsedFile
from gouml.analyzers.module_locator import ModuleLocator
from gouml.models.options import ExtractOptions
from gouml.models.uml import Model, Package


def _raise_walk_error(error: OSError) -> None:
    raise WalkError(error.filename or "", error.strerror or str(error)) from error


class ModelGenerator:
    """Assembles the whole-tree Model.

    One generator may be reused across runs; the module cache is created per
    run so module boundaries are re-read every time.
    """

    def __init__(self, options: ExtractOptions | None = None, parser: GoParser | None = None) -> None:
        """Initialize the generator.

        Args:
            options: Extraction options (defaults applied)
            parser: Go parser to use (created if not given)
        """
        self.options = (options or ExtractOptions()).with_defaults()
        self.parser = parser or GoParser()

    def generate(self, root: Path | str) -> Model:
        """Extract the model rooted at ``root``.

        If ``root`` is a file, only that file (in its directory) is analyzed.

        Raises:
            RootPathError: If root does not exist or cannot be inspected
            TreeSitterUnavailableError: If the Go grammar cannot be loaded
            ModuleFileError: If a go.mod is unreadable or malformed
            GoParseError: If an eligible file is not valid Go
            WalkError: If a directory cannot be listed during the walk
        """
        root_abs = Path(os.path.abspath(root))
        try:
            root_info = os.stat(root_abs)
        except OSError as e:
            raise RootPathError(root_abs, e.strerror or str(e)) from e

        self.parser.ensure_available()

        if stat.S_ISDIR(root_info.st_mode):
            base_dir, only_file = root_abs, ""
        else:
            base_dir, only_file = root_abs.parent, root_abs.name

        locator = ModuleLocator()
        root_module = locator.module_for_dir(base_dir)
        extractor = DeclarationExtractor(locator, base_dir)
        file_filter = FileFilter(self.options, only_file=only_file)

        packages: list[Package] = []
        directories = [base_dir] if only_file else self._walk(root_abs)
        for directory in directories:
            try:
                packages.extend(self._parse_dir(directory, file_filter, extractor))
            except NoGoFilesError:
                continue

        return Model(
            root=str(root_abs),
            generated_at=datetime.now(UTC),
            module=root_module,
            packages=sort_packages(packages),
        )

    def _walk(self, root: Path) -> list[Path]:
        """List directories under root depth-first, pruning excluded names."""
        excluded = self.options.exclude_dir_names
        if root.name in excluded:
            return []

        directories: list[Path] = []
        for dirpath, dirnames, _ in os.walk(root, onerror=_raise_walk_error):
            dirnames[:] = sorted(d for d in dirnames if d not in excluded)
            directories.append(Path(dirpath))
        return directories

    def _parse_dir(
        self,
        directory: Path,
        file_filter: FileFilter,
        extractor: DeclarationExtractor,
    ) -> list[Package]:
        """Parse one directory into one Package per declared package name.

        Raises:
            NoGoFilesError: If no file in the directory passes the filter
        """
        try:
            with os.scandir(directory) as entries:
                names = sorted(
                    entry.name
                    for entry in entries
                    if not entry.is_dir(follow_symlinks=False)
                    and file_filter.accept(directory, entry.name)
                )
        except FileNotFoundError as e:
            raise NoGoFilesError(directory) from e
        except OSError as e:
            raise WalkError(directory, e.strerror or str(e)) from e

        if not names:
            raise NoGoFilesError(directory)

        by_package: dict[str, list[ParsedFile]] = defaultdict(list)
        for name in names:
            parsed = self.parser.parse_file(directory / name)
            by_package[parsed.package_name].append(parsed)

        packages: list[Package] = []
        for package_name in sorted(by_package):
            package = extractor.extract(directory, package_name, by_package[package_name])
            packages.append(sort_package(package))
        return packages


def generate(root: Path | str, options: ExtractOptions | None = None) -> Model:
    """Extract the structural model of the Go tree at ``root``.

    Convenience function for one-off generation.
    """
    return ModelGenerator(options).generate(root)


def generate_json(root: Path | str, options: ExtractOptions | None = None) -> str:
    """Extract the model at ``root`` and serialize it.

    The indentation comes from ``options.indent`` (empty string = compact).
    """
    generator = ModelGenerator(options)
    model = generator.generate(root)
    return model.to_json(generator.options.indent or "")


__all__ = ["ModelGenerator", "generate", "generate_json"]
