"""gouml CLI interface.

Commands:
- generate: Extract the structural model of a Go source tree as JSON
- upload: Send a generated model to a collection endpoint
- check: Validate that the Go parser is available
- init: Initialize gouml configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines for CI/CD
- --version: Show version and exit
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from gouml import __version__
from gouml.analyzers.base import GoumlError
from gouml.config import GoumlConfig, create_default_config, load_config
from gouml.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="gouml",
    help="Structural model extractor for Go source trees",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: GoumlConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"gouml {__version__}")
        raise typer.Exit()


def split_comma_list(value: str | None) -> list[str]:
    """Split a comma separated list, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """gouml - Go structural model extractor.

    Walks a Go source tree and emits one deterministic JSON document
    describing its packages, types, fields, methods and functions.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _get_config() -> GoumlConfig:
    return _config if _config is not None else GoumlConfig()


# =============================================================================
# generate command
# =============================================================================


@app.command()
def generate(
    path: Annotated[
        Path,
        typer.Argument(
            help="Directory (or single .go file) to analyze",
        ),
    ] = Path("."),
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write output to file (default: stdout, overrides config)",
        ),
    ] = None,
    tests: Annotated[
        bool | None,
        typer.Option(
            "--tests/--no-tests",
            help="Include *_test.go files (overrides config)",
        ),
    ] = None,
    generated: Annotated[
        bool | None,
        typer.Option(
            "--generated/--no-generated",
            help='Include files with "Code generated ... DO NOT EDIT" headers (overrides config)',
        ),
    ] = None,
    indent: Annotated[
        str | None,
        typer.Option(
            "--indent",
            help="JSON indent unit (empty for compact)",
        ),
    ] = None,
    compact: Annotated[
        bool,
        typer.Option(
            "--compact",
            help="Emit compact JSON (same as --indent '')",
        ),
    ] = False,
    exclude: Annotated[
        str | None,
        typer.Option(
            "--exclude",
            help="Comma-separated directory names to skip (replaces the defaults)",
        ),
    ] = None,
) -> None:
    """Extract the structural model of a Go source tree.

    Exit codes:
        0: Model written
        1: Analysis or write failed
    """
    from gouml.analyzers.generator import ModelGenerator

    cfg = _get_config()
    options = cfg.analysis.to_extract_options()
    if tests is not None:
        options = replace(options, include_tests=tests)
    if generated is not None:
        options = replace(options, include_generated=generated)

    exclude_names = split_comma_list(exclude)
    if exclude_names:
        options = replace(options, exclude_dir_names=frozenset(exclude_names))
    if compact:
        options = replace(options, indent="")
    elif indent is not None:
        options = replace(options, indent=indent)

    output_path = output or (Path(cfg.output.path) if cfg.output.path else None)

    _logger.info(f"Analyzing: {path.resolve()}")

    generator = ModelGenerator(options)
    try:
        model = generator.generate(path)
    except GoumlError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    _logger.structured(
        logging.INFO,
        f"Extracted {model.package_count} package(s), {model.type_count} type(s), "
        f"{model.function_count} function(s)",
        packages=model.package_count,
        types=model.type_count,
        functions=model.function_count,
    )

    data = model.to_json(generator.options.indent or "") + "\n"

    if output_path is None:
        typer.echo(data, nl=False)
        return

    try:
        output_path.write_text(data, encoding="utf-8")
    except OSError as e:
        _logger.error(f"write {output_path}: {e.strerror or e}")
        raise typer.Exit(1)

    _logger.info(f"Model written to: {output_path}")


# =============================================================================
# upload command
# =============================================================================


@app.command()
def upload(
    file: Annotated[
        Path,
        typer.Argument(
            help="Generated model to upload",
            exists=True,
            dir_okay=False,
        ),
    ],
    url: Annotated[
        str | None,
        typer.Option(
            "--url",
            help="Upload endpoint (default: config or DC_UPLOAD_URL)",
        ),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            help="Bearer token (default: config or DC_TOKEN)",
        ),
    ] = None,
    project_name: Annotated[
        str | None,
        typer.Option(
            "--project-name",
            help="Project name sent with the artifact",
        ),
    ] = None,
    system_element_id: Annotated[
        str | None,
        typer.Option(
            "--system-element-id",
            help="Target system element (default: config or DC_SYSTEM_ELEMENT_ID)",
        ),
    ] = None,
    commit: Annotated[
        str | None,
        typer.Option(
            "--commit",
            help="Commit id (default: GITHUB_SHA or git HEAD)",
        ),
    ] = None,
    branch: Annotated[
        str | None,
        typer.Option(
            "--branch",
            help="Branch name (default: GITHUB_REF_NAME, GITHUB_HEAD_REF or git)",
        ),
    ] = None,
    dry_run: Annotated[
        bool | None,
        typer.Option(
            "--dry-run/--no-dry-run",
            help="Log the request instead of sending it (default: config, true)",
        ),
    ] = None,
) -> None:
    """Upload a generated model.

    The upload is skipped when no endpoint is configured.

    Exit codes:
        0: Uploaded, dry-run logged, or skipped
        1: Upload failed
    """
    from gouml.uploader import Uploader, UploadRequest
    from gouml.utils.git import get_branch, get_commit_id

    upload_cfg = _get_config().upload

    target_url = url or upload_cfg.url
    if not target_url:
        _logger.info("Skipping upload: no upload URL provided.")
        _logger.info("To enable upload, pass --url or set DC_UPLOAD_URL.")
        return

    request = UploadRequest(
        url=target_url,
        file_path=file,
        token=token or upload_cfg.token,
        project_name=project_name or upload_cfg.project_name,
        system_element_id=system_element_id or upload_cfg.system_element_id,
        commit_id=commit or get_commit_id(),
        branch=branch or get_branch(),
    )

    _logger.info("Upload configuration:")
    _logger.info(f"  Upload URL: {request.url}")
    _logger.info(f"  Token: {'[provided]' if request.token else '(not set)'}")
    _logger.info(f"  System Element ID: {request.system_element_id or '(not set)'}")

    uploader = Uploader(timeout=upload_cfg.timeout)
    try:
        result = uploader.upload(
            request,
            dry_run=upload_cfg.dry_run if dry_run is None else dry_run,
        )
    except GoumlError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    if result.sent and result.body:
        typer.echo(result.body)


# =============================================================================
# check command
# =============================================================================


@app.command()
def check() -> None:
    """Validate that the tree-sitter Go grammar can be loaded.

    Exit codes:
        0: Parser available
        1: Parser missing
    """
    from gouml.analyzers.base import TreeSitterUnavailableError
    from gouml.analyzers.go_parser import GoParser

    try:
        GoParser().ensure_available()
    except TreeSitterUnavailableError as e:
        typer.echo(f"❌ tree-sitter Go grammar: {e}")
        raise typer.Exit(1)

    typer.echo("✅ tree-sitter Go grammar available")


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize gouml configuration.

    Creates .gouml/config.yaml with the default settings.
    """
    config_dir = Path(".gouml")
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_dir.mkdir(exist_ok=True)
    config_file.write_text(create_default_config())
    typer.echo(f"Created {config_file}")


if __name__ == "__main__":
    app()
