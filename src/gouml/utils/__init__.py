"""gouml utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- git: Commit id and branch discovery for upload metadata
"""

from gouml.utils.git import get_branch, get_commit_id
from gouml.utils.logging import get_logger

__all__ = [
    "get_branch",
    "get_commit_id",
    "get_logger",
]
