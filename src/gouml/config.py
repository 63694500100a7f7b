"""gouml configuration system.

Configuration is YAML-based with per-run CLI overrides.
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.gouml/config.yaml
3. ./gouml.yaml

Upload settings fall back to the DC_UPLOAD_URL, DC_TOKEN and
DC_SYSTEM_ELEMENT_ID environment variables when the file leaves them unset.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from gouml.models.options import DEFAULT_EXCLUDE_DIR_NAMES, ExtractOptions

ENV_UPLOAD_URL = "DC_UPLOAD_URL"
ENV_TOKEN = "DC_TOKEN"
ENV_SYSTEM_ELEMENT_ID = "DC_SYSTEM_ELEMENT_ID"

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class AnalysisConfig:
    """Analysis configuration.

    Attributes:
        include_tests: Include *_test.go files
        include_generated: Include generated files
        exclude: Directory names to skip (empty = built-in defaults)
        indent: JSON indent unit (None = two spaces, "" = compact)
    """

    include_tests: bool = False
    include_generated: bool = False
    exclude: list[str] = field(default_factory=list)
    indent: str | None = None

    def __post_init__(self) -> None:
        """Validate analysis configuration."""
        if self.indent is not None and self.indent.strip(" \t"):
            raise ValueError(f"Indent must contain only spaces or tabs (got {self.indent!r})")

    def to_extract_options(self) -> ExtractOptions:
        """Convert to generator options."""
        return ExtractOptions(
            include_tests=self.include_tests,
            include_generated=self.include_generated,
            exclude_dir_names=frozenset(self.exclude),
            indent=self.indent,
        )


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        path: Output file path (empty = stdout)
    """

    path: str = ""


@dataclass
class UploadConfig:
    """Artifact upload configuration.

    Attributes:
        url: Upload endpoint (upload is skipped when unset)
        token: Bearer token
        project_name: Project name sent with the artifact
        system_element_id: Target system element
        dry_run: Log the request instead of sending it
        timeout: Request timeout in seconds
    """

    url: str | None = None
    token: str | None = None
    project_name: str | None = None
    system_element_id: str | None = None
    dry_run: bool = True
    timeout: float = 60.0

    def __post_init__(self) -> None:
        """Apply environment fallbacks."""
        self.url = self.url or os.environ.get(ENV_UPLOAD_URL) or None
        self.token = self.token or os.environ.get(ENV_TOKEN) or None
        self.system_element_id = (
            self.system_element_id or os.environ.get(ENV_SYSTEM_ELEMENT_ID) or None
        )

        if self.timeout <= 0:
            raise ValueError(f"Upload timeout must be positive (got {self.timeout})")

    @property
    def enabled(self) -> bool:
        """Return True if an upload endpoint is configured."""
        return bool(self.url)


@dataclass
class GoumlConfig:
    """Top-level gouml configuration.

    Attributes:
        analysis: Which files and directories take part
        output: Where the artifact is written
        upload: Where the artifact is sent
    """

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax, e.g. ``token: "${DC_TOKEN}"``.

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_VAR_PATTERN.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.gouml/config.yaml
    2. ./gouml.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".gouml" / "config.yaml",
        start_path / "gouml.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _as_name_list(value: Any) -> list[str]:
    """Accept either a YAML list or a comma separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(v).strip() for v in value if str(v).strip()]


def load_config_from_dict(data: dict[str, Any]) -> GoumlConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        GoumlConfig instance
    """
    data = substitute_env_vars(data)

    config = GoumlConfig()

    if "analysis" in data:
        analysis_data = data["analysis"] or {}
        config.analysis = AnalysisConfig(
            include_tests=bool(analysis_data.get("include_tests", False)),
            include_generated=bool(analysis_data.get("include_generated", False)),
            exclude=_as_name_list(analysis_data.get("exclude")),
            indent=analysis_data.get("indent"),
        )

    if "output" in data:
        output_data = data["output"] or {}
        config.output = OutputConfig(path=output_data.get("path") or "")

    if "upload" in data:
        upload_data = data["upload"] or {}
        config.upload = UploadConfig(
            url=upload_data.get("url"),
            token=upload_data.get("token"),
            project_name=upload_data.get("project_name"),
            system_element_id=upload_data.get("system_element_id"),
            dry_run=bool(upload_data.get("dry_run", True)),
            timeout=float(upload_data.get("timeout", 60.0)),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> GoumlConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        GoumlConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path) as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = GoumlConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    exclude = ", ".join(f'"{name}"' for name in DEFAULT_EXCLUDE_DIR_NAMES)
    return f'''# gouml configuration

# Analysis settings
analysis:
  include_tests: false      # include *_test.go files
  include_generated: false  # include "Code generated ... DO NOT EDIT" files
  exclude: [{exclude}]
  indent: "  "              # "" for compact JSON

# Output settings
output:
  path: "uml.json"          # empty for stdout

# Upload settings (skipped when no url is set)
upload:
  # url: "${{DC_UPLOAD_URL}}"
  # token: "${{DC_TOKEN}}"
  # project_name: "my-service"
  # system_element_id: "${{DC_SYSTEM_ELEMENT_ID}}"
  dry_run: true
'''
