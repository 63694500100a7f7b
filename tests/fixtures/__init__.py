"""Test fixtures for gouml.

Sample Repositories:
- sample_repos/go_module: Module example.com/shapes with a sub package,
  a test file, a generated file, a vendor tree and a broken testdata file
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent

SAMPLE_REPOS_DIR = FIXTURES_DIR / "sample_repos"

GO_MODULE_PATH = SAMPLE_REPOS_DIR / "go_module"


def get_sample_repo(name: str) -> Path:
    """Get path to a sample repository.

    Raises:
        ValueError: If repository doesn't exist
    """
    repo_path = SAMPLE_REPOS_DIR / name
    if not repo_path.exists():
        raise ValueError(f"Sample repository not found: {name}")
    return repo_path
