"""Shared pytest fixtures for gouml tests.

Fixtures are organized by category:
- Path fixtures: The sample Go module shipped with the tests
- Environment fixtures: Isolation from CI and upload variables
- Source fixtures: Helpers that write or parse Go source on the fly
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from gouml.analyzers.go_parser import GoParser, ParsedFile

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_repos_dir(fixtures_dir: Path) -> Path:
    """Return the path to sample repository fixtures."""
    return fixtures_dir / "sample_repos"


@pytest.fixture
def go_module_dir(sample_repos_dir: Path) -> Path:
    """Return the path to the sample Go module (example.com/shapes)."""
    return sample_repos_dir / "go_module"


# =============================================================================
# Environment Fixtures
# =============================================================================

_ISOLATED_ENV_VARS = (
    "DC_UPLOAD_URL",
    "DC_TOKEN",
    "DC_SYSTEM_ELEMENT_ID",
    "GITHUB_SHA",
    "GITHUB_REF_NAME",
    "GITHUB_HEAD_REF",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove CI and upload variables so tests see a clean environment."""
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Source Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def go_parser() -> GoParser:
    """Return a shared Go parser (grammar loaded once per session)."""
    return GoParser()


@pytest.fixture
def parse_go(go_parser: GoParser, tmp_path: Path) -> Callable[[str], ParsedFile]:
    """Return a helper that parses Go source text."""

    def _parse(source: str, name: str = "main.go") -> ParsedFile:
        return go_parser.parse_source(source.encode("utf-8"), tmp_path / name)

    return _parse


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Return a helper that writes {relative path: content} under tmp_path."""

    def _write(files: dict[str, str]) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return tmp_path

    return _write
